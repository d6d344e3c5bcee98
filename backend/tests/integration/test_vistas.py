import pytest

from sepi.extensions import hub
from sepi.models import Credencial, Estudiante, Evaluacion
from sepi.rubricas import criteria_for
from sepi.services import feedback_service

CRITERIOS = criteria_for('Primer Semestre')


def _formulario(estudiante_id, puntaje=8, accion='guardar'):
    datos = {'estudiante': str(estudiante_id), 'semestre': 'Primer Semestre', accion: 'on'}
    for criterio in CRITERIOS:
        datos[f'puntaje_{criterio.id}'] = str(puntaje)
    return datos


# --- Estudiantes y profesores ---

def test_admin_agrega_estudiante(admin_client, app):
    respuesta = admin_client.post(
        '/estudiantes/crear',
        data={'nombre': 'Ana Díaz', 'matricula': 'M-001'},
        follow_redirects=True,
    )

    html = respuesta.get_data(as_text=True)
    assert 'Estudiante agregado exitosamente' in html
    assert 'Ana Díaz' in html
    with app.app_context():
        assert Estudiante.query.count() == 1


def test_estudiante_sin_matricula(admin_client, app):
    respuesta = admin_client.post('/estudiantes/crear', data={'nombre': 'Ana Díaz', 'matricula': ''}, follow_redirects=True)

    assert 'Por favor, completa todos los campos.' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Estudiante.query.count() == 0


def test_nombre_de_estudiante_se_limpia(admin_client, app):
    admin_client.post('/estudiantes/crear', data={'nombre': '<script>x</script>Ana', 'matricula': 'M-1'})

    with app.app_context():
        assert '<script>' not in Estudiante.query.one().nombre


def test_nombre_con_ampersand_se_guarda_tal_cual(admin_client, app):
    admin_client.post('/estudiantes/crear', data={'nombre': 'García & López', 'matricula': 'M-2'})

    with app.app_context():
        assert Estudiante.query.one().nombre == 'García & López'


def test_admin_crea_profesor(admin_client, app):
    respuesta = admin_client.post(
        '/profesores/crear',
        data={'nombre': 'Luis Ortega', 'email': 'luis@posgrado.edu.mx', 'password': 'secreto123'},
        follow_redirects=True,
    )

    assert 'Profesor creado exitosamente' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Credencial.query.filter_by(email='luis@posgrado.edu.mx').count() == 1


def test_profesor_con_correo_registrado(admin_client, admin):
    respuesta = admin_client.post(
        '/profesores/crear',
        data={'nombre': 'Copia', 'email': admin['email'], 'password': 'secreto123'},
        follow_redirects=True,
    )

    assert 'Este email ya está registrado' in respuesta.get_data(as_text=True)


# --- Evaluaciones ---

def test_formulario_de_evaluacion_muestra_rubrica(profesor_client, crear_estudiante):
    crear_estudiante('Ana Díaz', 'M-001')

    html = profesor_client.get('/evaluaciones/nueva', query_string={'semestre': 'Segundo Semestre'}).get_data(as_text=True)

    for criterio in criteria_for('Segundo Semestre'):
        assert f'puntaje_{criterio.id}' in html
    assert 'Ana Díaz' in html


def test_guardar_evaluacion_completa(profesor_client, profesor, crear_estudiante, app):
    estudiante = crear_estudiante()

    respuesta = profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id']))

    assert respuesta.status_code == 302
    with app.app_context():
        evaluacion = Evaluacion.query.one()
    assert evaluacion.estudiante_id == estudiante['id']
    assert evaluacion.profesor_id == profesor['id']
    assert evaluacion.nota_final == pytest.approx(8.0)
    assert len(evaluacion.puntajes) == 5


def test_no_guarda_evaluacion_incompleta(profesor_client, crear_estudiante, app):
    estudiante = crear_estudiante()
    datos = _formulario(estudiante['id'])
    datos[f'puntaje_{CRITERIOS[0].id}'] = '0'

    respuesta = profesor_client.post('/evaluaciones/nueva', data=datos)

    assert respuesta.status_code == 200
    assert 'completa todos los criterios' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Evaluacion.query.count() == 0


def test_no_guarda_sin_estudiante(profesor_client, app):
    respuesta = profesor_client.post('/evaluaciones/nueva', data=_formulario(''))

    assert 'Por favor, selecciona un estudiante.' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Evaluacion.query.count() == 0


def test_puntaje_fuera_de_rango(profesor_client, crear_estudiante, app):
    estudiante = crear_estudiante()

    respuesta = profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id'], puntaje=11))

    assert 'debe estar entre 0 y 10' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Evaluacion.query.count() == 0


def test_retroalimentacion_sin_configuracion(profesor_client, crear_estudiante, app):
    estudiante = crear_estudiante()

    respuesta = profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id'], accion='generar'))

    assert respuesta.status_code == 200
    assert feedback_service.MENSAJE_SIN_CONFIGURACION in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Evaluacion.query.count() == 0


def test_retroalimentacion_no_se_guarda(profesor_client, crear_estudiante, app, monkeypatch):
    estudiante = crear_estudiante()
    monkeypatch.setattr(
        'sepi.routes.evaluaciones.generate_feedback',
        lambda *args, **kwargs: feedback_service.GeneratedText('Excelente presentación.'),
    )

    respuesta = profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id'], accion='generar'))

    assert 'Excelente presentación.' in respuesta.get_data(as_text=True)
    with app.app_context():
        assert Evaluacion.query.count() == 0


def test_api_nota_final(profesor_client):
    puntajes = {c.id: 10 for c in CRITERIOS}
    puntajes[CRITERIOS[0].id] = 0

    respuesta = profesor_client.post('/evaluaciones/api/nota-final', json={
        'semestre': 'Primer Semestre',
        'puntajes': puntajes,
    })

    datos = respuesta.get_json()
    assert respuesta.status_code == 200
    assert datos['nota_final'] == pytest.approx(10 - CRITERIOS[0].peso / 10)
    assert datos['completa'] is False


def test_api_nota_final_rechaza_semestre_invalido(profesor_client):
    respuesta = profesor_client.post('/evaluaciones/api/nota-final', json={'semestre': 'Sexto', 'puntajes': {}})

    assert respuesta.status_code == 400
    assert 'error' in respuesta.get_json()


@pytest.mark.parametrize('url', ['/evaluaciones/api/nota-final', '/evaluaciones/api/retroalimentacion'])
@pytest.mark.parametrize('cuerpo', [
    {'semestre': 'Primer Semestre', 'puntajes': [5]},
    [{'semestre': 'Primer Semestre'}],
])
def test_api_rechaza_borrador_mal_formado(profesor_client, url, cuerpo):
    respuesta = profesor_client.post(url, json=cuerpo)

    assert respuesta.status_code == 400
    assert 'error' in respuesta.get_json()


def test_api_retroalimentacion_acepta_id_como_texto(profesor_client, crear_estudiante):
    estudiante = crear_estudiante()

    respuesta = profesor_client.post('/evaluaciones/api/retroalimentacion', json={
        'estudiante_id': str(estudiante['id']),
        'semestre': 'Primer Semestre',
        'puntajes': {c.id: 8 for c in CRITERIOS},
    })

    assert respuesta.status_code == 200
    assert respuesta.get_json()['motivo'] == 'sin_configuracion'


def test_api_retroalimentacion_id_invalido(profesor_client):
    respuesta = profesor_client.post('/evaluaciones/api/retroalimentacion', json={
        'estudiante_id': 'abc',
        'semestre': 'Primer Semestre',
        'puntajes': {},
    })

    assert respuesta.status_code == 400


def test_api_retroalimentacion_sin_configuracion(profesor_client, crear_estudiante):
    estudiante = crear_estudiante()

    respuesta = profesor_client.post('/evaluaciones/api/retroalimentacion', json={
        'estudiante_id': estudiante['id'],
        'semestre': 'Primer Semestre',
        'puntajes': {c.id: 8 for c in CRITERIOS},
    })

    datos = respuesta.get_json()
    assert datos['ok'] is False
    assert datos['motivo'] == 'sin_configuracion'


def test_api_sin_sesion_redirige(client, admin):
    respuesta = client.post('/evaluaciones/api/nota-final', json={'semestre': 'Primer Semestre', 'puntajes': {}})

    assert respuesta.status_code == 302


# --- Panel y reportes ---

def test_panel_con_evaluaciones_recientes(profesor_client, crear_estudiante):
    estudiante = crear_estudiante('Ana Díaz', 'M-001')
    profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id'], puntaje=9))

    html = profesor_client.get('/dashboard/').get_data(as_text=True)

    assert 'Ana Díaz' in html
    assert '9.00' in html


def test_reportes_vacios(profesor_client):
    html = profesor_client.get('/reportes/').get_data(as_text=True)

    assert 'No hay datos suficientes' in html


def test_reportes_con_promedios(profesor_client, crear_estudiante):
    estudiante = crear_estudiante('Ana María López', 'M-001')
    profesor_client.post('/evaluaciones/nueva', data=_formulario(estudiante['id'], puntaje=6))

    html = profesor_client.get('/reportes/').get_data(as_text=True)

    assert 'Ana María' in html
    assert 'PrimerS' in html


# --- Ajustes ---

def test_cambiar_nombre(profesor_client, profesor):
    respuesta = profesor_client.post('/perfil/nombre', data={'nombre': 'Nombre Nuevo'}, follow_redirects=True)

    html = respuesta.get_data(as_text=True)
    assert 'Nombre actualizado correctamente' in html
    assert 'Nombre Nuevo' in html


def test_cambiar_contrasena(profesor_client, profesor, client, iniciar_sesion):
    respuesta = profesor_client.post(
        '/perfil/cambiar-contrasena',
        data={'password': 'nueva-clave', 'confirm_password': 'nueva-clave'},
        follow_redirects=True,
    )
    assert 'Contraseña actualizada correctamente' in respuesta.get_data(as_text=True)

    client.get('/auth/logout')
    fallido = iniciar_sesion(profesor)
    assert fallido.status_code == 200

    exitoso = iniciar_sesion(dict(profesor, password='nueva-clave'))
    assert exitoso.status_code == 302


def test_contrasenas_distintas(profesor_client):
    respuesta = profesor_client.post(
        '/perfil/cambiar-contrasena',
        data={'password': 'nueva-clave', 'confirm_password': 'otra-clave'},
        follow_redirects=True,
    )

    assert 'Las contraseñas no coinciden.' in respuesta.get_data(as_text=True)


# --- Tiempo real ---

def test_stream_de_estudiantes_entrega_instantanea_y_libera(admin_client, crear_estudiante):
    crear_estudiante('Ana Díaz', 'M-001')

    respuesta = admin_client.get('/tiempo-real/estudiantes', buffered=False)
    assert respuesta.mimetype == 'text/event-stream'

    primero = next(iter(respuesta.response))
    assert b'event: snapshot' in primero
    assert 'Ana Díaz' in primero.decode('utf-8')
    assert hub.listener_count('estudiantes') == 1

    respuesta.close()
    assert hub.listener_count('estudiantes') == 0
