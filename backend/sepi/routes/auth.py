from flask import Blueprint, render_template, redirect, url_for, flash, request, g
from sepi.forms.usuarios import LoginForm
from sepi.services.errores import AuthenticationFailed
import logging

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
auth_logger = logging.getLogger('auth')


def _siguiente_seguro(next_page):
    # Solo rutas relativas de esta misma aplicación
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return url_for('dashboard.index')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    sesion = g.sesion
    if sesion.is_authenticated:
        return redirect(url_for('dashboard.index'))

    form = LoginForm()

    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        try:
            sesion.login(email, form.password.data, remember=form.remember.data)
        except AuthenticationFailed as e:
            flash(e.message, 'danger')
            return render_template('auth/login.html', form=form)

        if not sesion.is_authenticated:
            # Credencial válida pero sin perfil: la sesión ya se cerró
            auth_logger.warning(f"Inicio de sesión sin perfil para {email}")
            return render_template('auth/login.html', form=form)

        flash(f"Bienvenido/a {sesion.user['nombre']}", 'success')
        return redirect(_siguiente_seguro(request.args.get('next')))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
def logout():
    g.sesion.logout()
    flash('Has cerrado sesión correctamente', 'info')
    return redirect(url_for('auth.login'))
