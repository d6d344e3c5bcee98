"""Proveedor de identidad: credenciales, inicio y cierre de sesión.

Las credenciales viven en la tabla ``credenciales`` y la sesión del navegador
la administra Flask-Login. Los perfiles (nombre, rol) no pertenecen a este
módulo; ver ``persistencia_service``.
"""
import logging
from flask_login import login_user, logout_user, current_user
from sepi.extensions import db
from sepi.models import Credencial
from sepi.services.errores import AuthenticationFailed, EmailAlreadyInUse

auth_logger = logging.getLogger('auth')


def find_account(email):
    return Credencial.query.filter_by(email=(email or '').strip().lower()).first()


def create_account(email, password):
    """Agrega una credencial a la sesión de base de datos sin confirmarla.

    El llamador decide cuándo hacer commit, así la cuenta y su perfil se
    guardan en la misma transacción.
    """
    if find_account(email):
        raise EmailAlreadyInUse(email.strip().lower())

    credencial = Credencial(email=email)
    credencial.set_password(password)
    db.session.add(credencial)
    db.session.flush()
    auth_logger.info(f"Credencial creada para {credencial.email} (uid={credencial.uid})")
    return credencial


class IdentityProvider:
    """Adaptador sobre Flask-Login con eventos de inicio/cierre de sesión.

    Los observadores registrados con ``on_auth_state_changed`` reciben la
    credencial activa (o ``None``) al registrarse y después de cada cambio.
    """

    def __init__(self):
        self._listeners = []

    @property
    def current_principal(self):
        if current_user and current_user.is_authenticated:
            return current_user
        return None

    def on_auth_state_changed(self, callback):
        self._listeners.append(callback)
        callback(self.current_principal)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(self, email, password, remember=False):
        credencial = find_account(email)
        auth_logger.info(f"Credencial encontrada: {credencial.email if credencial else 'No encontrada'}")

        if credencial is None or not credencial.check_password(password):
            auth_logger.warning(f"Intento de inicio de sesión fallido para {email}")
            raise AuthenticationFailed('Correo o contraseña incorrectos.')

        login_user(credencial, remember=remember)
        credencial.registrar_acceso()
        db.session.commit()
        self._notify(credencial)
        return credencial

    def sign_out(self):
        principal = self.current_principal
        logout_user()
        if principal is not None:
            auth_logger.info("Sesión cerrada")
        self._notify(None)

    def update_password(self, new_password):
        principal = self.current_principal
        if principal is None:
            raise AuthenticationFailed('No se pudo encontrar el usuario actual.')
        principal.set_password(new_password)
        db.session.commit()
        auth_logger.info(f"Contraseña actualizada para {principal.email}")

    def _notify(self, principal):
        for callback in list(self._listeners):
            callback(principal)
