from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from sepi.utils.texto import limpiar_texto
from sepi.extensions import db
from sepi.forms.usuarios import ProfesorForm
from sepi.services import persistencia_service
from sepi.services.errores import EmailAlreadyInUse, ServiceUnavailable

profesores_bp = Blueprint('profesores', __name__, url_prefix='/profesores')


@profesores_bp.route('/')
def listar():
    usuarios = persistencia_service.snapshot_once(persistencia_service.subscribe_professors)
    return render_template('views/profesores.html', usuarios=usuarios, form=ProfesorForm())


@profesores_bp.route('/crear', methods=['POST'])
def crear():
    form = ProfesorForm()
    if not form.validate_on_submit():
        for errores in form.errors.values():
            flash(errores[0], 'danger')
        return redirect(url_for('profesores.listar'))

    email = form.email.data.strip().lower()
    try:
        persistencia_service.create_professor(limpiar_texto(form.nombre.data), email, form.password.data)
        flash('Profesor creado exitosamente', 'success')
        current_app.logger.info(f"Profesor creado: {email}")
    except EmailAlreadyInUse:
        flash('El correo electrónico ya está registrado', 'danger')
    except ServiceUnavailable:
        raise
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error al crear profesor: {str(e)}", exc_info=True)
        flash('Error al crear profesor', 'danger')

    return redirect(url_for('profesores.listar'))
