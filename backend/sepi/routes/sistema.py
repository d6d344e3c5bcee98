from flask import Blueprint, render_template, redirect, url_for, g, flash
from sepi.services.sesion_service import SessionState

sistema_bp = Blueprint('sistema', __name__, url_prefix='/sistema')


@sistema_bp.route('/no-disponible')
def servicio_no_disponible():
    if g.sesion.state != SessionState.SERVICE_UNAVAILABLE:
        return redirect(url_for('main.index'))
    return render_template('errors/servicio_no_disponible.html', error=g.sesion.error), 503


@sistema_bp.route('/reintentar', methods=['POST'])
def reintentar():
    g.sesion.retry()
    if g.sesion.state == SessionState.SERVICE_UNAVAILABLE:
        flash('La base de datos sigue sin responder.', 'danger')
        return redirect(url_for('sistema.servicio_no_disponible'))
    return redirect(url_for('main.index'))
