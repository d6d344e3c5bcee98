"""Acceso a datos de SEPI: perfiles, estudiantes y evaluaciones.

Las lecturas se exponen como suscripciones (``subscribe_*``) que entregan
instantáneas completas y devuelven un callable para liberarlas. Las escrituras
confirman la transacción y publican la colección afectada para que los
suscriptores reciban la nueva instantánea.
"""
from datetime import timezone
from functools import wraps
import logging

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, InterfaceError, DisconnectionError

from sepi.extensions import db, hub
from sepi.models import User, Estudiante, Evaluacion
from sepi.services import identidad_service
from sepi.services.errores import ServiceUnavailable, NotFound, PermissionDenied

logger = logging.getLogger(__name__)

ERRORES_DE_CONEXION = (OperationalError, InterfaceError, DisconnectionError)


def translate_connection_errors(func):
    """Convierte los errores de conexión de SQLAlchemy en ServiceUnavailable."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ERRORES_DE_CONEXION as e:
            logger.error(f"Base de datos no disponible en {func.__name__}: {e}")
            try:
                db.session.rollback()
            except ERRORES_DE_CONEXION:
                logger.debug("Rollback imposible: la conexión ya se perdió")
            raise ServiceUnavailable(extra={'detalle': str(e)}) from e
    return wrapper


def to_iso_string(fecha):
    """Fecha de la base de datos a ISO-8601 en UTC con milisegundos y sufijo Z.

    Las fechas sin zona horaria se interpretan como UTC.
    """
    if fecha is None:
        return None
    if fecha.tzinfo is not None:
        fecha = fecha.astimezone(timezone.utc).replace(tzinfo=None)
    return fecha.strftime('%Y-%m-%dT%H:%M:%S.') + f'{fecha.microsecond // 1000:03d}Z'


# --- Conexión ---

@translate_connection_errors
def connect():
    db.session.execute(text('SELECT 1'))
    if not current_app.config.get('SEPI_SCHEMA_READY'):
        db.create_all()
        current_app.config['SEPI_SCHEMA_READY'] = True
        logger.info("Esquema de base de datos verificado")


@translate_connection_errors
def has_any_profile():
    return db.session.query(User.id).limit(1).first() is not None


# --- Cargadores de instantáneas ---

def _serialize_evaluation(evaluacion):
    return {
        'id': evaluacion.id,
        'estudiante_id': evaluacion.estudiante_id,
        'profesor_id': evaluacion.profesor_id,
        'semestre': evaluacion.semestre,
        'fecha': to_iso_string(evaluacion.fecha),
        'puntajes': list(evaluacion.puntajes or []),
        'nota_final': evaluacion.nota_final,
    }


@translate_connection_errors
def _load_students():
    estudiantes = Estudiante.query.order_by(Estudiante.nombre.asc(), Estudiante.id.asc()).all()
    return [e.to_dict() for e in estudiantes]


@translate_connection_errors
def _load_evaluations(order_by_date_desc=False):
    if order_by_date_desc:
        orden = (Evaluacion.fecha.desc(), Evaluacion.id.desc())
    else:
        orden = (Evaluacion.fecha.asc(), Evaluacion.id.asc())
    return [_serialize_evaluation(ev) for ev in Evaluacion.query.order_by(*orden).all()]


@translate_connection_errors
def _load_profile(uid):
    perfil = db.session.get(User, uid)
    return perfil.to_dict() if perfil else None


@translate_connection_errors
def _load_professors():
    return [u.to_dict() for u in User.query.order_by(User.nombre.asc(), User.id.asc()).all()]


# --- Suscripciones ---

def subscribe_students(on_data, on_error=None, any_thread=False):
    return hub.subscribe('estudiantes', _load_students, on_data, on_error, any_thread=any_thread)


def subscribe_evaluations(on_data, on_error=None, order_by_date_desc=False, any_thread=False):
    return hub.subscribe(
        'evaluaciones',
        lambda: _load_evaluations(order_by_date_desc),
        on_data,
        on_error,
        any_thread=any_thread,
    )


def subscribe_profile(uid, on_data, on_error=None):
    return hub.subscribe('usuarios', lambda: _load_profile(uid), on_data, on_error)


def subscribe_professors(on_data, on_error=None):
    return hub.subscribe('usuarios', _load_professors, on_data, on_error)


def snapshot_once(subscribe, *args, **kwargs):
    """Suscribe, toma la primera instantánea y libera la suscripción."""
    resultado = {}

    def on_data(instantanea):
        resultado.setdefault('data', instantanea)

    def on_error(error):
        resultado.setdefault('error', error)

    unsubscribe = subscribe(*args, on_data=on_data, on_error=on_error, **kwargs)
    unsubscribe()

    if 'error' in resultado:
        raise resultado['error']
    return resultado.get('data')


# --- Escrituras ---

@translate_connection_errors
def create_student(nombre, matricula):
    estudiante = Estudiante(nombre=nombre.strip(), matricula=matricula.strip())
    db.session.add(estudiante)
    db.session.commit()
    resultado = estudiante.to_dict()
    logger.info(f"Estudiante creado: {resultado['nombre']} ({resultado['matricula']})")
    hub.publish('estudiantes')
    return resultado


@translate_connection_errors
def create_evaluation(data):
    evaluacion = Evaluacion(
        estudiante_id=data['estudiante_id'],
        profesor_id=data['profesor_id'],
        semestre=data['semestre'],
        puntajes=[
            {'criterio_id': s['criterio_id'], 'puntaje': s['puntaje']}
            for s in data['puntajes']
        ],
        nota_final=data['nota_final'],
    )
    db.session.add(evaluacion)
    db.session.commit()
    resultado = _serialize_evaluation(evaluacion)
    logger.info(f"Evaluación {resultado['id']} guardada para el estudiante {resultado['estudiante_id']}")
    hub.publish('evaluaciones')
    return resultado


def _provision_profile(nombre, email, password, rol):
    # Credencial y perfil en una sola transacción
    try:
        credencial = identidad_service.create_account(email, password)
        perfil = User(id=credencial.uid, nombre=nombre.strip(), email=credencial.email, rol=rol)
        db.session.add(perfil)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    resultado = perfil.to_dict()
    logger.info(f"Perfil {rol} creado: {resultado['email']}")
    hub.publish('usuarios')
    return resultado


@translate_connection_errors
def create_professor(nombre, email, password):
    return _provision_profile(nombre, email, password, 'profesor')


@translate_connection_errors
def create_first_admin(nombre, email, password):
    if has_any_profile():
        raise PermissionDenied('El sistema ya tiene usuarios registrados.')
    return _provision_profile(nombre, email, password, 'admin')


@translate_connection_errors
def update_professor_name(uid, nombre):
    perfil = db.session.get(User, uid)
    if perfil is None:
        raise NotFound(f"Perfil {uid} no encontrado", extra={'uid': uid})
    perfil.nombre = nombre.strip()
    db.session.commit()
    hub.publish('usuarios')


@translate_connection_errors
def update_current_password(new_password, identity=None):
    (identity or identidad_service.IdentityProvider()).update_password(new_password)
