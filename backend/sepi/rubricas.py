"""Rúbricas de evaluación por semestre.

Tabla estática: los pesos de los cinco criterios de cada semestre suman 100.
"""
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Criterio:
    id: str
    nombre: str
    peso: int
    descripcion: str

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'peso': self.peso,
            'descripcion': self.descripcion,
        }


SEMESTRES = [
    'Primer Semestre',
    'Segundo Semestre',
    'Tercer Semestre',
    'Cuarto Semestre',
    'Quinto Semestre',
]

CRITERIOS_EVALUACION: Dict[str, List[Criterio]] = {
    'Primer Semestre': [
        Criterio('1-1', 'Definición del Problema', 20, 'Claridad y delimitación del problema de investigación.'),
        Criterio('1-2', 'Revisión del Estado del Arte', 25, 'Profundidad y pertinencia de la literatura revisada.'),
        Criterio('1-3', 'Justificación y Relevancia', 20, 'Importancia del problema y contribución potencial.'),
        Criterio('1-4', 'Hipótesis u Objetivo General', 15, 'Coherencia y claridad de la hipótesis o el objetivo.'),
        Criterio('1-5', 'Viabilidad Técnica y Académica', 20, 'Factibilidad del proyecto con los recursos y tiempo disponibles.'),
    ],
    'Segundo Semestre': [
        Criterio('2-1', 'Marco Teórico Profundizado', 20, 'Solidez y profundidad del marco teórico que sustenta la investigación.'),
        Criterio('2-2', 'Metodología', 25, 'Claridad, adecuación y rigor del diseño metodológico propuesto.'),
        Criterio('2-3', 'Modelo Analítico o Computacional', 20, 'Desarrollo y coherencia del modelo a utilizar.'),
        Criterio('2-4', 'Avances Prácticos o Simulados', 20, 'Resultados preliminares obtenidos y su análisis inicial.'),
        Criterio('2-5', 'Plan de Trabajo Ajustado', 15, 'Ajustes y realismo del plan de trabajo para las siguientes etapas.'),
    ],
    'Tercer Semestre': [
        Criterio('3-1', 'Implementación Técnica/Prototipo', 25, 'Calidad y avance de la implementación o prototipo desarrollado.'),
        Criterio('3-2', 'Análisis Intermedio de Resultados', 25, 'Profundidad del análisis de los resultados obtenidos hasta la fecha.'),
        Criterio('3-3', 'Comparación con Estado del Arte', 15, 'Análisis comparativo de los resultados con trabajos relacionados.'),
        Criterio('3-4', 'Identificación de Problemas Técnicos', 15, 'Capacidad para identificar y proponer soluciones a problemas encontrados.'),
        Criterio('3-5', 'Comunicación Técnica y Visual', 20, 'Claridad en la presentación de avances y resultados.'),
    ],
    'Cuarto Semestre': [
        Criterio('4-1', 'Resultados Completos y Validados', 30, 'Presentación y validación de los resultados finales de la investigación.'),
        Criterio('4-2', 'Discusión y Contribución Científica', 25, 'Análisis profundo de los resultados y su aporte al conocimiento.'),
        Criterio('4-3', 'Redacción de Artículos o Tesis', 20, 'Avance y calidad en la redacción de productos científicos.'),
        Criterio('4-4', 'Publicaciones/Divulgación', 15, 'Esfuerzos y logros en la divulgación de la investigación.'),
        Criterio('4-5', 'Preparación para Defensa', 10, 'Madurez y preparación del trabajo para la defensa de tesis.'),
    ],
    'Quinto Semestre': [
        Criterio('5-1', 'Diagnóstico de Retrasos', 20, 'Justificación clara y fundamentada de la necesidad de extensión.'),
        Criterio('5-2', 'Plan de Recuperación', 25, 'Plan de trabajo detallado y realista para concluir la tesis.'),
        Criterio('5-3', 'Nuevos Avances Técnicos', 20, 'Resultados concluyentes adicionales obtenidos durante la extensión.'),
        Criterio('5-4', 'Impacto de la Ampliación', 15, 'Análisis del impacto de los nuevos resultados en la contribución final.'),
        Criterio('5-5', 'Compromiso Académico', 20, 'Demostración de un compromiso claro para la finalización del grado.'),
    ],
}


def criteria_for(semestre: str) -> List[Criterio]:
    """Criterios del semestre, en orden. Semestre desconocido: lista vacía."""
    return list(CRITERIOS_EVALUACION.get(semestre, []))
