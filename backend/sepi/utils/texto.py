import html

import bleach


def limpiar_texto(valor):
    """Quita etiquetas HTML y espacios sobrantes de un texto libre.

    El resultado se guarda tal cual; el escape para mostrarlo lo hace Jinja.
    """
    return html.unescape(bleach.clean((valor or '').strip(), tags=set(), strip=True))
