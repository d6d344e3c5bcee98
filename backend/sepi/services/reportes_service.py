"""Agregados del panel y de los reportes.

Todas las funciones son puras sobre las instantáneas de estudiantes y
evaluaciones, y se recalculan completas cada vez que cualquiera cambia.
"""
from collections import OrderedDict

NOMBRE_DESCONOCIDO = 'N/A'


def _nombres_por_id(estudiantes):
    return {e['id']: e['nombre'] for e in estudiantes}


def recent_evaluations(evaluaciones, estudiantes, limite=5):
    """Últimas evaluaciones con el nombre del estudiante. Espera evaluaciones en orden descendente."""
    nombres = _nombres_por_id(estudiantes)
    return [
        dict(ev, nombre_estudiante=nombres.get(ev['estudiante_id'], NOMBRE_DESCONOCIDO))
        for ev in evaluaciones[:limite]
    ]


def performance_trend(evaluaciones, limite=10):
    """Las ``limite`` evaluaciones más recientes en orden cronológico."""
    recientes = list(reversed(evaluaciones[:limite]))
    return [{'n': i + 1, 'nota': ev['nota_final']} for i, ev in enumerate(recientes)]


def dashboard_summary(evaluaciones, estudiantes):
    return {
        'total_evaluaciones': len(evaluaciones),
        'total_estudiantes': len(estudiantes),
        'recientes': recent_evaluations(evaluaciones, estudiantes),
        'tendencia': performance_trend(evaluaciones),
    }


def _etiqueta_estudiante(nombre):
    return ' '.join(nombre.split(' ')[:2])


def student_averages(evaluaciones, estudiantes):
    """Promedio de nota final por estudiante. Se omiten los estudiantes sin evaluaciones."""
    acumulado = {}
    for ev in evaluaciones:
        total, cantidad = acumulado.get(ev['estudiante_id'], (0.0, 0))
        acumulado[ev['estudiante_id']] = (total + ev['nota_final'], cantidad + 1)

    promedios = []
    for estudiante in estudiantes:
        total, cantidad = acumulado.get(estudiante['id'], (0.0, 0))
        promedio = total / cantidad if cantidad else 0
        if promedio > 0:
            promedios.append({'nombre': _etiqueta_estudiante(estudiante['nombre']), 'promedio': promedio})
    return promedios


def semester_averages(evaluaciones):
    """Promedio por semestre, en el orden en que aparece cada semestre."""
    acumulado = OrderedDict()
    for ev in evaluaciones:
        total, cantidad = acumulado.get(ev['semestre'], (0.0, 0))
        acumulado[ev['semestre']] = (total + ev['nota_final'], cantidad + 1)

    return [
        {'nombre': semestre.replace(' Semestre', 'S'), 'promedio': total / cantidad}
        for semestre, (total, cantidad) in acumulado.items()
    ]
