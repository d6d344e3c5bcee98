import logging
from flask import Flask, render_template, g, request
from flask_cors import CORS
from config import Config
import pymysql
pymysql.install_as_MySQLdb()
from sepi.extensions import db, login_manager, migrate, csrf
from sepi.models import Credencial
from sepi.routes import register_blueprints
from sepi.services import persistencia_service
from sepi.services.errores import ServiceUnavailable
from sepi.services.identidad_service import IdentityProvider
from sepi.services.sesion_service import SessionGuard
from sepi.utils.permisos import gate_request, can_access


def nota_filter(valor):
    if valor is None:
        return 'N/A'
    return f"{float(valor):.2f}"


def init_schema(app):
    """
    Crea las tablas que falten al iniciar la aplicación.
    Si la base de datos no responde, el primer request mostrará la página de servicio no disponible.
    """
    with app.app_context():
        try:
            persistencia_service.connect()
            app.logger.info("Base de datos lista")
        except ServiceUnavailable as e:
            app.logger.warning(f"No se pudo preparar la base de datos al iniciar: {e.extra.get('detalle', e.message)}")


def create_app(config_class=Config):

    app = Flask(
        __name__,
        template_folder=config_class.TEMPLATES_PATH,
        static_folder=config_class.STATIC_PATH
    )

    # Cargar configuración
    app.config.from_object(config_class)
    config_class.init_app(app)
    config_class.verify_paths()

    # Iniciar extensiones
    db.init_app(app)
    migrate.init_app(app, db)

    app.jinja_env.filters['nota'] = nota_filter

    # Configuración de Flask-Login
    login_manager.login_view = 'auth.login'
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(Credencial, int(user_id))
        except ValueError:
            return None

    # CORS y CSRF
    CORS(app, resources={r"/*": {"origins": app.config['CORS_ORIGINS']}})
    csrf.init_app(app)

    register_blueprints(app)

    # Un guardián de sesión por request, consultado por una sola compuerta
    @app.before_request
    def iniciar_sesion():
        if request.endpoint == 'static':
            return None
        g.sesion = SessionGuard(persistencia_service, IdentityProvider())
        g.sesion.start()
        app.logger.debug(f"Estado de sesión para {request.path}: {g.sesion.state.value}")
        return gate_request(g.sesion, request.endpoint)

    @app.teardown_request
    def cerrar_sesion(exc):
        sesion = g.pop('sesion', None)
        if sesion is not None:
            sesion.close()

    @app.context_processor
    def inject_sesion():
        sesion = g.get('sesion')
        return dict(
            sesion=sesion,
            usuario=sesion.user if sesion is not None else None,
            puede_acceder=lambda endpoint: can_access(sesion.role if sesion else None, endpoint),
        )

    # Filtrar logs de acceso de los streams en tiempo real
    class NoAccessLogFilter(logging.Filter):
        def filter(self, record):
            return '/tiempo-real/' not in record.getMessage()

    werkzeug_logger = logging.getLogger('werkzeug')
    werkzeug_logger.addFilter(NoAccessLogFilter())

    init_schema(app)

    # Manejadores de error
    @app.errorhandler(404)
    def page_not_found(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        return render_template('errors/500.html'), 500

    @app.errorhandler(ServiceUnavailable)
    def service_unavailable(error):
        app.logger.error(f"Servicio no disponible durante {request.path}: {error.message}")
        return render_template('errors/servicio_no_disponible.html', error=error), 503

    for error_de_conexion in persistencia_service.ERRORES_DE_CONEXION:
        app.register_error_handler(error_de_conexion, lambda e: service_unavailable(ServiceUnavailable(extra={'detalle': str(e)})))

    return app
