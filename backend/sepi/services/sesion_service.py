"""Estado de la sesión: quién es el usuario actual y qué puede ver.

``SessionGuard`` es el dueño único de la suscripción al perfil y del observador
de identidad. Se crea al inicio de cada petición y se cierra al final.

Estados::

    INITIALIZING -> FIRST_RUN | UNAUTHENTICATED | LOADING -> READY
    cualquiera   -> SERVICE_UNAVAILABLE (retry() vuelve a INITIALIZING)
"""
from enum import Enum
import logging

from sepi.services.errores import ServiceUnavailable

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    INITIALIZING = 'inicializando'
    FIRST_RUN = 'primer_uso'
    UNAUTHENTICATED = 'no_autenticado'
    LOADING = 'cargando'
    READY = 'listo'
    SERVICE_UNAVAILABLE = 'servicio_no_disponible'


class SessionGuard:

    def __init__(self, gateway, identity):
        self.gateway = gateway
        self.identity = identity
        self.state = SessionState.INITIALIZING
        self.user = None
        self.error = None
        self._principal_id = None
        self._auth_unsubscribe = None
        self._profile_unsubscribe = None
        self._listeners = []

    # --- Consultas ---

    @property
    def is_authenticated(self):
        return self.state == SessionState.READY and self.user is not None

    @property
    def role(self):
        return self.user['rol'] if self.is_authenticated else None

    def add_listener(self, callback):
        self._listeners.append(callback)

        def remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    # --- Ciclo de vida ---

    def start(self):
        self._set_state(SessionState.INITIALIZING)
        try:
            self.gateway.connect()
            hay_perfiles = self.gateway.has_any_profile()
        except ServiceUnavailable as e:
            self._fail(e)
            return self.state

        if not hay_perfiles:
            logger.info("Primer uso detectado: no hay usuarios registrados")
            self._set_state(SessionState.FIRST_RUN)
            return self.state

        self._auth_unsubscribe = self.identity.on_auth_state_changed(self._on_auth_state_changed)
        return self.state

    def retry(self):
        """Reinicia la inicialización. Solo actúa en SERVICE_UNAVAILABLE."""
        if self.state != SessionState.SERVICE_UNAVAILABLE:
            return False
        self.close()
        self.error = None
        self.user = None
        self._principal_id = None
        self.start()
        return True

    def close(self):
        self._release_profile()
        if self._auth_unsubscribe is not None:
            self._auth_unsubscribe()
            self._auth_unsubscribe = None

    # --- Acciones ---

    def login(self, email, password, remember=False):
        return self.identity.sign_in(email, password, remember=remember)

    def logout(self):
        self._release_profile()
        self.identity.sign_out()
        self.user = None
        self._principal_id = None
        if self.state != SessionState.SERVICE_UNAVAILABLE:
            self._set_state(SessionState.UNAUTHENTICATED)

    # --- Eventos ---

    def _on_auth_state_changed(self, principal):
        self._release_profile()

        if principal is None:
            self.user = None
            self._principal_id = None
            self._set_state(SessionState.UNAUTHENTICATED)
            return

        uid = principal.uid
        self._principal_id = uid
        self._set_state(SessionState.LOADING)

        unsubscribe = self.gateway.subscribe_profile(
            uid,
            on_data=lambda perfil: self._on_profile(uid, perfil),
            on_error=self._on_profile_error,
        )
        # La primera instantánea llega dentro de subscribe_profile y pudo cerrar la sesión
        if self._principal_id == uid and self.state in (SessionState.LOADING, SessionState.READY):
            self._profile_unsubscribe = unsubscribe
        else:
            unsubscribe()

    def _on_profile(self, uid, perfil):
        if uid != self._principal_id:
            return

        if perfil is not None:
            self.user = perfil
            self._set_state(SessionState.READY)
            return

        logger.warning(f"La credencial {uid} no tiene perfil. Cerrando sesión.")
        self.user = None
        self.identity.sign_out()
        if self.state in (SessionState.LOADING, SessionState.READY):
            self._principal_id = None
            self._set_state(SessionState.UNAUTHENTICATED)

    def _on_profile_error(self, error):
        if isinstance(error, ServiceUnavailable):
            self._fail(error)
            return
        logger.error(f"Error en la suscripción al perfil: {error}")
        self.user = None
        self._principal_id = None
        self._set_state(SessionState.UNAUTHENTICATED)

    # --- Internos ---

    def _fail(self, error):
        logger.error(f"Servicio no disponible: {error}")
        self.error = error
        self.user = None
        self._set_state(SessionState.SERVICE_UNAVAILABLE)

    def _release_profile(self):
        if self._profile_unsubscribe is not None:
            self._profile_unsubscribe()
            self._profile_unsubscribe = None

    def _set_state(self, state):
        self.state = state
        for callback in list(self._listeners):
            callback(state)
