from flask import Blueprint, render_template, redirect, url_for, flash, g, current_app
from sepi.utils.texto import limpiar_texto
from sepi.extensions import db
from sepi.forms.usuarios import NombreForm, ContrasenaForm
from sepi.services import persistencia_service
from sepi.services.errores import SepiError, ServiceUnavailable

perfil_bp = Blueprint('perfil', __name__, url_prefix='/perfil')


def _flash_errores(form):
    for errores in form.errors.values():
        flash(errores[0], 'danger')


@perfil_bp.route('/ajustes')
def ajustes():
    return render_template(
        'views/ajustes.html',
        nombre_form=NombreForm(nombre=g.sesion.user['nombre']),
        contrasena_form=ContrasenaForm(),
    )


@perfil_bp.route('/nombre', methods=['POST'])
def actualizar_nombre():
    form = NombreForm()
    if not form.validate_on_submit():
        _flash_errores(form)
        return redirect(url_for('perfil.ajustes'))

    try:
        persistencia_service.update_professor_name(g.sesion.user['id'], limpiar_texto(form.nombre.data))
        flash('Nombre actualizado correctamente', 'success')
    except ServiceUnavailable:
        raise
    except SepiError as e:
        flash(e.message, 'danger')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error al actualizar nombre: {str(e)}", exc_info=True)
        flash('Error al actualizar el nombre', 'danger')

    return redirect(url_for('perfil.ajustes'))


@perfil_bp.route('/cambiar-contrasena', methods=['POST'])
def cambiar_contrasena():
    form = ContrasenaForm()
    if not form.validate_on_submit():
        _flash_errores(form)
        return redirect(url_for('perfil.ajustes'))

    try:
        persistencia_service.update_current_password(form.password.data)
        flash('Contraseña actualizada correctamente', 'success')
    except ServiceUnavailable:
        raise
    except SepiError as e:
        flash(e.message, 'danger')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error al cambiar contraseña: {str(e)}", exc_info=True)
        flash('Error al cambiar la contraseña', 'danger')

    return redirect(url_for('perfil.ajustes'))
