"""
SEPI - Configuración de pruebas y fixtures
"""
import os
import pytest
from faker import Faker

os.environ['TESTING'] = 'true'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['GEMINI_API_KEY'] = ''

from config import Config
from sepi import create_app
from sepi.extensions import db
from sepi.services import persistencia_service

fake = Faker('es_ES')

PASSWORD = 'secreto123'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    GEMINI_API_KEY = ''
    SSE_HEARTBEAT_SECONDS = 1


@pytest.fixture
def app():
    """Aplicación con base de datos en memoria, nueva para cada prueba"""
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _datos_usuario():
    return {
        'nombre': fake.name(),
        'email': f"{fake.unique.user_name()}@posgrado.edu.mx".lower(),
        'password': PASSWORD,
    }


@pytest.fixture
def admin(app):
    """Administrador inicial creado por la ruta de configuración"""
    datos = _datos_usuario()
    with app.app_context():
        perfil = persistencia_service.create_first_admin(datos['nombre'], datos['email'], datos['password'])
    return dict(perfil, password=datos['password'])


@pytest.fixture
def profesor(app, admin):
    datos = _datos_usuario()
    with app.app_context():
        perfil = persistencia_service.create_professor(datos['nombre'], datos['email'], datos['password'])
    return dict(perfil, password=datos['password'])


@pytest.fixture
def crear_estudiante(app):
    def _crear(nombre=None, matricula=None):
        with app.app_context():
            return persistencia_service.create_student(
                nombre or fake.name(),
                matricula or fake.bothify('MAT-####'),
            )
    return _crear


def _login(client, usuario, follow_redirects=False):
    return client.post(
        '/auth/login',
        data={'email': usuario['email'], 'password': usuario['password']},
        follow_redirects=follow_redirects,
    )


@pytest.fixture
def iniciar_sesion(client):
    """Inicia sesión en el cliente de pruebas con un usuario creado por los fixtures"""
    return lambda usuario, follow_redirects=False: _login(client, usuario, follow_redirects)


@pytest.fixture
def admin_client(client, admin):
    _login(client, admin)
    return client


@pytest.fixture
def profesor_client(client, profesor):
    _login(client, profesor)
    return client
