from flask import Blueprint, render_template
from sepi.services import persistencia_service, reportes_service

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


@dashboard_bp.route('/')
def index():
    evaluaciones = persistencia_service.snapshot_once(
        persistencia_service.subscribe_evaluations, order_by_date_desc=True
    )
    estudiantes = persistencia_service.snapshot_once(persistencia_service.subscribe_students)
    resumen = reportes_service.dashboard_summary(evaluaciones, estudiantes)
    return render_template('views/dashboard.html', resumen=resumen)
