import os
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    # 1. Configuración de rutas base
    BASE_DIR = Path(__file__).resolve().parent.parent
    FRONTEND_DIR = BASE_DIR / 'frontend'
    BACKEND_DIR = BASE_DIR / 'backend'

    # 2. Configuración de rutas
    TEMPLATES_PATH = str(FRONTEND_DIR / 'templates')
    STATIC_PATH = str(FRONTEND_DIR / 'static')

    # 3. Configuración esencial
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key-segura-123")

    # 4. Base de datos
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI", f"sqlite:///{BACKEND_DIR}/sepi.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "False").lower() == "true"

    # 5. Configuración de seguridad
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "False").lower() == "true"
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
    WTF_CSRF_ENABLED = True
    MIN_PASSWORD_LENGTH = 6

    # 6. Configuración CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5000,http://127.0.0.1:5000").split(",")

    # 7. Configuración Flask-Login
    REMEMBER_COOKIE_DURATION = timedelta(days=7)
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)

    # 8. Configuración de desarrollo
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"
    TEMPLATES_AUTO_RELOAD = True if DEBUG else False

    # 9. Retroalimentación con Gemini (sin API key la función queda deshabilitada)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", 0.7))

    # 10. Suscripciones en tiempo real (server-sent events)
    SSE_HEARTBEAT_SECONDS = int(os.getenv("SSE_HEARTBEAT_SECONDS", 15))

    @classmethod
    def init_app(cls, app):
        """Inicialización adicional para la aplicación"""
        app.config.setdefault('SEPI_SCHEMA_READY', False)

    @classmethod
    def verify_paths(cls):
        """Verifica que las rutas críticas existan"""
        required_paths = [
            cls.TEMPLATES_PATH,
            cls.STATIC_PATH,
        ]

        for path in required_paths:
            if not os.path.exists(path):
                raise RuntimeError(f"Ruta crítica no encontrada: {path}")
