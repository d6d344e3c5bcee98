"""Suscripciones en tiempo real sobre las colecciones de la aplicación.

Cada suscripción recibe instantáneas completas (no deltas): la primera al
suscribirse y una nueva cada vez que se publica un cambio en su colección.
El llamador es dueño de la suscripción y debe liberarla con el callable que
devuelve ``subscribe``.

Por defecto una suscripción solo recibe publicaciones hechas desde el hilo que
la creó, porque sus callbacks suelen tocar estado de la petición (sesión de
Flask-Login, ``g``). Los consumidores que entregan a una cola, como los
streams SSE, se registran con ``any_thread=True``.
"""
import itertools
import logging
import threading

logger = logging.getLogger(__name__)


class _Suscripcion:
    __slots__ = ('id', 'coleccion', 'loader', 'on_data', 'on_error', 'hilo', 'any_thread')

    def __init__(self, id, coleccion, loader, on_data, on_error, any_thread):
        self.id = id
        self.coleccion = coleccion
        self.loader = loader
        self.on_data = on_data
        self.on_error = on_error
        self.hilo = threading.get_ident()
        self.any_thread = any_thread


class SnapshotHub:
    """Registro de suscripciones activas por colección."""

    def __init__(self):
        self._lock = threading.Lock()
        self._suscripciones = {}
        self._ids = itertools.count(1)

    def subscribe(self, coleccion, loader, on_data, on_error=None, any_thread=False):
        """Registra una suscripción y entrega la primera instantánea.

        Args:
            coleccion (str): Colección observada ('estudiantes', 'evaluaciones', 'usuarios').
            loader (callable): Función sin argumentos que devuelve la instantánea actual.
            on_data (callable): Recibe cada instantánea.
            on_error (callable): Recibe la excepción si la carga falla. La suscripción termina.
            any_thread (bool): Recibir también publicaciones de otros hilos.

        Returns:
            callable: Libera la suscripción. Llamarlo más de una vez no tiene efecto.
        """
        suscripcion = _Suscripcion(next(self._ids), coleccion, loader, on_data, on_error, any_thread)
        with self._lock:
            self._suscripciones[suscripcion.id] = suscripcion

        self._entregar(suscripcion, propagar=True)

        def unsubscribe():
            with self._lock:
                eliminada = self._suscripciones.pop(suscripcion.id, None)
            if eliminada is not None:
                logger.debug(f"Suscripción {suscripcion.id} a '{coleccion}' liberada")

        return unsubscribe

    def publish(self, coleccion):
        """Vuelve a cargar y entrega la instantánea a cada suscriptor de la colección."""
        hilo = threading.get_ident()
        with self._lock:
            destinatarios = [
                s for s in self._suscripciones.values()
                if s.coleccion == coleccion and (s.any_thread or s.hilo == hilo)
            ]
        for suscripcion in destinatarios:
            self._entregar(suscripcion)

    def listener_count(self, coleccion=None):
        with self._lock:
            if coleccion is None:
                return len(self._suscripciones)
            return sum(1 for s in self._suscripciones.values() if s.coleccion == coleccion)

    def _entregar(self, suscripcion, propagar=False):
        try:
            instantanea = suscripcion.loader()
        except Exception as e:
            with self._lock:
                self._suscripciones.pop(suscripcion.id, None)
            logger.warning(f"Suscripción {suscripcion.id} a '{suscripcion.coleccion}' terminada por error: {e}")
            if suscripcion.on_error is not None:
                suscripcion.on_error(e)
            elif propagar:
                raise
            return

        with self._lock:
            activa = suscripcion.id in self._suscripciones
        if activa:
            suscripcion.on_data(instantanea)
