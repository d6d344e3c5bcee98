from flask import Blueprint, render_template, redirect, url_for, flash, g, current_app
from sepi.forms.usuarios import PrimerAdminForm
from sepi.services import persistencia_service
from sepi.services.errores import EmailAlreadyInUse, PermissionDenied, AuthenticationFailed
from sepi.services.sesion_service import SessionState

setup_bp = Blueprint('setup', __name__, url_prefix='/setup')


@setup_bp.route('/', methods=['GET', 'POST'])
def primer_admin():
    if g.sesion.state != SessionState.FIRST_RUN:
        return redirect(url_for('auth.login'))

    form = PrimerAdminForm()

    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        password = form.password.data
        try:
            perfil = persistencia_service.create_first_admin(form.nombre.data, email, password)
        except EmailAlreadyInUse as e:
            current_app.logger.warning(f"Configuración inicial con correo ya registrado: {email}")
            return render_template('auth/conflicto.html', email=e.extra['email']), 409
        except PermissionDenied as e:
            flash(e.message, 'warning')
            return redirect(url_for('auth.login'))

        current_app.logger.info(f"Administrador inicial creado: {perfil['email']}")
        try:
            g.sesion.login(email, password)
        except AuthenticationFailed:
            flash('Cuenta creada. Inicia sesión para continuar.', 'info')
            return redirect(url_for('auth.login'))

        flash(f"Bienvenido/a {perfil['nombre']}. Tu cuenta de administrador está lista.", 'success')
        return redirect(url_for('dashboard.index'))

    return render_template('auth/primer_admin.html', form=form)
