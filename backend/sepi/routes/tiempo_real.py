from flask import Blueprint, request
from sepi.services import persistencia_service
from sepi.utils.tiempo_real import stream_snapshots

tiempo_real_bp = Blueprint('tiempo_real', __name__, url_prefix='/tiempo-real')


@tiempo_real_bp.route('/estudiantes')
def estudiantes():
    return stream_snapshots(persistencia_service.subscribe_students)


@tiempo_real_bp.route('/evaluaciones')
def evaluaciones():
    desc = request.args.get('orden', 'asc') == 'desc'
    return stream_snapshots(persistencia_service.subscribe_evaluations, order_by_date_desc=desc)
