import json
import queue

from flask import Response, current_app, stream_with_context


def _evento(tipo, payload):
    return f"event: {tipo}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


def stream_snapshots(subscribe, **kwargs):
    """Respuesta SSE que reenvía cada instantánea de una suscripción.

    La suscripción se libera cuando el cliente cierra la conexión o cuando
    llega un error.
    """
    heartbeat = current_app.config.get('SSE_HEARTBEAT_SECONDS', 15)
    cola = queue.Queue()

    unsubscribe = subscribe(
        on_data=lambda instantanea: cola.put(('snapshot', instantanea)),
        on_error=lambda error: cola.put(('error', {'error': getattr(error, 'message', str(error))})),
        any_thread=True,
        **kwargs
    )

    def generar():
        try:
            while True:
                try:
                    tipo, payload = cola.get(timeout=heartbeat)
                except queue.Empty:
                    yield ": ping\n\n"
                    continue
                yield _evento(tipo, payload)
                if tipo == 'error':
                    break
        finally:
            unsubscribe()

    return Response(
        stream_with_context(generar()),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'},
    )
