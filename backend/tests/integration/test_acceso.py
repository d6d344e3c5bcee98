from sepi.extensions import db
from sepi.models import User
from sepi.services import persistencia_service
from sepi.services.errores import ServiceUnavailable
from sepi.services.identidad_service import create_account


def test_sin_usuarios_toda_ruta_lleva_a_configuracion_inicial(client):
    for ruta in ('/', '/dashboard/', '/auth/login', '/reportes/'):
        respuesta = client.get(ruta)
        assert respuesta.status_code == 302
        assert respuesta.headers['Location'].endswith('/setup/')


def test_configuracion_inicial_crea_admin_e_inicia_sesion(client, app):
    respuesta = client.post('/setup/', data={
        'nombre': 'Ada Lovelace',
        'email': 'ada@posgrado.edu.mx',
        'password': 'secreto123',
    })

    assert respuesta.status_code == 302
    assert respuesta.headers['Location'].endswith('/dashboard/')

    panel = client.get('/dashboard/')
    assert panel.status_code == 200
    assert 'Ada Lovelace' in panel.get_data(as_text=True)

    with app.app_context():
        perfil = persistencia_service.snapshot_once(persistencia_service.subscribe_profile, 1)
    assert perfil['rol'] == 'admin'


def test_configuracion_inicial_valida_el_formulario(client):
    respuesta = client.post('/setup/', data={'nombre': 'Ada', 'email': 'no-es-correo', 'password': '123'})

    assert respuesta.status_code == 200
    html = respuesta.get_data(as_text=True)
    assert 'dirección de correo válida' in html
    assert 'al menos 6 caracteres' in html


def test_configuracion_inicial_deshabilitada_cuando_ya_hay_usuarios(client, admin):
    respuesta = client.get('/setup/')

    assert respuesta.status_code == 302
    assert '/auth/login' in respuesta.headers['Location']


def test_credencial_huerfana_muestra_pagina_de_conflicto(client, app):
    with app.app_context():
        create_account('ada@posgrado.edu.mx', 'secreto123')
        db.session.commit()

    respuesta = client.post('/setup/', data={
        'nombre': 'Ada Lovelace',
        'email': 'ada@posgrado.edu.mx',
        'password': 'secreto123',
    })

    assert respuesta.status_code == 409
    html = respuesta.get_data(as_text=True)
    assert 'ada@posgrado.edu.mx' in html
    assert 'Reintentar' in html


def test_sin_sesion_redirige_a_login(client, admin):
    respuesta = client.get('/reportes/')

    assert respuesta.status_code == 302
    assert '/auth/login' in respuesta.headers['Location']
    assert 'next=' in respuesta.headers['Location']


def test_login_incorrecto(client, admin):
    respuesta = client.post('/auth/login', data={'email': admin['email'], 'password': 'otra-clave'})

    assert respuesta.status_code == 200
    assert 'Correo o contraseña incorrectos.' in respuesta.get_data(as_text=True)


def test_login_respeta_next_relativo(client, admin):
    respuesta = client.post(
        '/auth/login?next=/reportes/',
        data={'email': admin['email'], 'password': admin['password']},
    )

    assert respuesta.headers['Location'].endswith('/reportes/')


def test_login_ignora_next_externo(client, admin):
    respuesta = client.post(
        '/auth/login?next=https://otro-sitio.com/',
        data={'email': admin['email'], 'password': admin['password']},
    )

    assert respuesta.headers['Location'].endswith('/dashboard/')


def test_logout(admin_client):
    respuesta = admin_client.get('/auth/logout')
    assert '/auth/login' in respuesta.headers['Location']

    despues = admin_client.get('/dashboard/')
    assert despues.status_code == 302
    assert '/auth/login' in despues.headers['Location']


def test_profesor_no_accede_a_las_listas(profesor_client):
    for ruta in ('/estudiantes/', '/profesores/'):
        respuesta = profesor_client.get(ruta)
        assert respuesta.status_code == 302
        assert respuesta.headers['Location'].endswith('/dashboard/')


def test_profesor_no_ve_enlaces_de_administracion(profesor_client):
    html = profesor_client.get('/dashboard/').get_data(as_text=True)

    assert '/estudiantes/' not in html
    assert '/evaluaciones/nueva' in html


def test_perfil_eliminado_cierra_la_sesion(profesor_client, profesor, app):
    with app.app_context():
        db.session.delete(db.session.get(User, profesor['id']))
        db.session.commit()

    respuesta = profesor_client.get('/dashboard/')

    assert respuesta.status_code == 302
    assert '/auth/login' in respuesta.headers['Location']


def test_base_de_datos_caida_muestra_servicio_no_disponible(client, admin, monkeypatch):
    def sin_conexion():
        raise ServiceUnavailable()

    monkeypatch.setattr(persistencia_service, 'connect', sin_conexion)

    respuesta = client.get('/dashboard/')
    assert respuesta.headers['Location'].endswith('/sistema/no-disponible')

    pagina = client.get('/sistema/no-disponible')
    assert pagina.status_code == 503
    assert 'Reintentar' in pagina.get_data(as_text=True)

    reintento = client.post('/sistema/reintentar')
    assert reintento.headers['Location'].endswith('/sistema/no-disponible')

    monkeypatch.undo()
    reintento = client.post('/sistema/reintentar')
    assert reintento.headers['Location'].endswith('/')


def test_pagina_no_disponible_sin_falla_redirige(client, admin):
    respuesta = client.get('/sistema/no-disponible')

    assert respuesta.status_code == 302


def test_ruta_inexistente(admin_client):
    assert admin_client.get('/no-existe').status_code == 404
