from flask import flash, redirect, request, url_for

from sepi.services.sesion_service import SessionState

# Siempre accesibles, incluso sin base de datos
PUBLIC_ROUTES = {
    'static',
    'sistema.servicio_no_disponible',
    'sistema.reintentar',
}

# Accesibles sin iniciar sesión
ANONYMOUS_ROUTES = {
    'auth.login',
    'setup.primer_admin',
}

# Blueprints de administración de listas (solo admin)
ADMIN_BLUEPRINTS = {
    'estudiantes',
    'profesores',
}

ROLES = ('admin', 'profesor')


def can_access(role, route_id):
    """Indica si un rol (``None`` = sin sesión) puede acceder a un endpoint."""
    if route_id in PUBLIC_ROUTES or route_id in ANONYMOUS_ROUTES:
        return True
    if role not in ROLES:
        return False

    blueprint = route_id.split('.', 1)[0] if route_id else ''
    if blueprint in ADMIN_BLUEPRINTS:
        return role == 'admin'
    return True


def gate_request(sesion, endpoint):
    """Decide a dónde redirigir la petición actual. ``None`` si puede continuar."""
    if endpoint is None or endpoint in PUBLIC_ROUTES:
        return None

    if sesion.state == SessionState.SERVICE_UNAVAILABLE:
        return redirect(url_for('sistema.servicio_no_disponible'))

    if sesion.state == SessionState.FIRST_RUN:
        if endpoint == 'setup.primer_admin':
            return None
        return redirect(url_for('setup.primer_admin'))

    if not sesion.is_authenticated:
        if can_access(None, endpoint):
            return None
        if endpoint != 'main.index':
            flash('Debes iniciar sesión para acceder a esta página.', 'warning')
        return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))

    if not can_access(sesion.role, endpoint):
        return redirect(url_for('dashboard.index'))
    return None
