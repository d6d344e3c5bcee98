from flask import Blueprint, render_template
from sepi.services import persistencia_service, reportes_service

reportes_bp = Blueprint('reportes', __name__, url_prefix='/reportes')


@reportes_bp.route('/')
def index():
    evaluaciones = persistencia_service.snapshot_once(persistencia_service.subscribe_evaluations)
    estudiantes = persistencia_service.snapshot_once(persistencia_service.subscribe_students)

    return render_template(
        'views/reportes.html',
        total_evaluaciones=len(evaluaciones),
        por_estudiante=reportes_service.student_averages(evaluaciones, estudiantes),
        por_semestre=reportes_service.semester_averages(evaluaciones),
    )
