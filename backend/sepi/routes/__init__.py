from .main import main_bp
from .auth import auth_bp
from .setup import setup_bp
from .sistema import sistema_bp
from .dashboard import dashboard_bp
from .evaluaciones import evaluaciones_bp
from .reportes import reportes_bp
from .perfil import perfil_bp
from .estudiantes import estudiantes_bp
from .profesores import profesores_bp
from .tiempo_real import tiempo_real_bp


def register_blueprints(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(setup_bp)
    app.register_blueprint(sistema_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(evaluaciones_bp)
    app.register_blueprint(reportes_bp)
    app.register_blueprint(perfil_bp)
    app.register_blueprint(estudiantes_bp)
    app.register_blueprint(profesores_bp)
    app.register_blueprint(tiempo_real_bp)
