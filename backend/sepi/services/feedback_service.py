"""Retroalimentación narrativa generada con Gemini.

``generate_feedback`` nunca lanza excepciones: devuelve ``GeneratedText`` o
``GenerationFailed``, y ambos tienen ``texto`` listo para mostrarse. El texto
es solo orientativo y no se guarda.
"""
from dataclasses import dataclass
import logging
from typing import Union

import google.generativeai as genai
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gemini-2.5-flash'
DEFAULT_TEMPERATURE = 0.7

MENSAJE_SIN_CONFIGURACION = "Error: La API_KEY de Gemini no está configurada. Por favor, contacta al administrador."
MENSAJE_ERROR_API = "Ocurrió un error al generar la retroalimentación. Por favor, inténtalo de nuevo más tarde."
MENSAJE_RESPUESTA_VACIA = "El servicio de generación no devolvió texto. Por favor, inténtalo de nuevo."


@dataclass(frozen=True)
class GeneratedText:
    texto: str
    ok = True


@dataclass(frozen=True)
class GenerationFailed:
    motivo: str
    texto: str
    ok = False


FeedbackResult = Union[GeneratedText, GenerationFailed]


def _linea_puntaje(score, criteria):
    criterio = next((c for c in criteria if c.id == score['criterio_id']), None)
    if criterio is None:
        return f"- Criterio Desconocido: {float(score['puntaje']):.1f}/10.0"
    return f"- {criterio.nombre} ({criterio.peso}%): {float(score['puntaje']):.1f}/10.0"


def build_feedback_prompt(student, draft, criteria) -> str:
    """Arma el prompt a partir del estudiante y del borrador de evaluación.

    ``draft`` necesita ``semestre``, ``puntajes`` y ``nota_final``.
    """
    scores_text = '\n            '.join(_linea_puntaje(s, criteria) for s in draft['puntajes'])
    semestre = draft['semestre']

    return f"""
        Eres un profesor universitario experimentado y constructivo, especializado en programas de maestría en ingeniería.
        Tu tarea es generar un informe de retroalimentación detallado y personalizado para un estudiante basado en la evaluación de su presentación de seminario.

        **Instrucciones:**
        1.  Comienza con un saludo cordial dirigido al estudiante por su nombre.
        2.  Menciona que esta es la retroalimentación para su presentación del {semestre}.
        3.  Analiza el desempeño del estudiante basándote en los siguientes criterios y calificaciones (escala 0-10):
            {scores_text}
        4.  La calificación final ponderada fue: {float(draft['nota_final']):.2f}/10.0.
        5.  **Estructura del feedback:**
            *   **Fortalezas:** Identifica 2-3 áreas donde el estudiante demostró un buen desempeño. Sé específico y relaciona tus comentarios con los criterios mejor calificados. Usa un tono alentador.
            *   **Áreas de Oportunidad:** Identifica 2-3 áreas clave que necesitan mejora. Sé constructivo y específico, basándote en los criterios con calificaciones más bajas. Ofrece sugerencias concretas o preguntas que guíen al estudiante a reflexionar y mejorar.
            *   **Recomendaciones Generales:** Proporciona uno o dos consejos generales para su próximo seminario o para el avance de su tesis.
            *   **Cierre:** Termina con una nota positiva y motivadora.

        **Estudiante:** {student['nombre']}
        **Semestre:** {semestre}

        Genera el informe de retroalimentación. Sé profesional, claro y conciso.
    """


def _config(key, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def generate_feedback(student, draft, criteria, api_key=None, model_name=None, temperature=None) -> FeedbackResult:
    api_key = api_key if api_key is not None else _config('GEMINI_API_KEY', '')
    if not api_key:
        logger.warning("GEMINI_API_KEY no configurada. La retroalimentación está deshabilitada.")
        return GenerationFailed('sin_configuracion', MENSAJE_SIN_CONFIGURACION)

    model_name = model_name or _config('GEMINI_MODEL', DEFAULT_MODEL)
    temperature = temperature if temperature is not None else _config('GEMINI_TEMPERATURE', DEFAULT_TEMPERATURE)

    try:
        prompt = build_feedback_prompt(student, draft, criteria)
        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(model_name)
        response = model.generate_content(prompt, generation_config={"temperature": temperature})
        texto = (response.text or '').strip()
    except Exception as e:
        logger.error(f"Error al llamar a la API de Gemini: {e}", exc_info=True)
        return GenerationFailed('error_api', MENSAJE_ERROR_API)

    if not texto:
        return GenerationFailed('respuesta_vacia', MENSAJE_RESPUESTA_VACIA)
    return GeneratedText(texto)
