from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from sepi.utils.texto import limpiar_texto
from sepi.extensions import db
from sepi.forms.estudiantes import EstudianteForm
from sepi.services import persistencia_service
from sepi.services.errores import ServiceUnavailable

estudiantes_bp = Blueprint('estudiantes', __name__, url_prefix='/estudiantes')


@estudiantes_bp.route('/')
def listar():
    estudiantes = persistencia_service.snapshot_once(persistencia_service.subscribe_students)
    return render_template('views/estudiantes.html', estudiantes=estudiantes, form=EstudianteForm())


@estudiantes_bp.route('/crear', methods=['POST'])
def crear():
    form = EstudianteForm()
    if not form.validate_on_submit():
        for errores in form.errors.values():
            flash(errores[0], 'danger')
        return redirect(url_for('estudiantes.listar'))

    try:
        nombre = limpiar_texto(form.nombre.data)
        matricula = limpiar_texto(form.matricula.data)
        persistencia_service.create_student(nombre, matricula)
        flash('Estudiante agregado exitosamente', 'success')
    except ServiceUnavailable:
        raise
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error al crear estudiante: {str(e)}", exc_info=True)
        flash('Error al agregar estudiante', 'danger')

    return redirect(url_for('estudiantes.listar'))
