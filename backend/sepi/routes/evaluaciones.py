from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify, g, current_app
from sepi.extensions import db
from sepi.forms.evaluaciones import EvaluacionForm, parse_puntajes
from sepi.rubricas import SEMESTRES, criteria_for
from sepi.services import persistencia_service
from sepi.services.calificacion_service import compute_final_score, is_evaluation_complete, initial_scores
from sepi.services.errores import ServiceUnavailable, ValidationFailed
from sepi.services.feedback_service import generate_feedback

evaluaciones_bp = Blueprint('evaluaciones', __name__, url_prefix='/evaluaciones')


def _opciones_estudiantes(estudiantes):
    return [('', 'Selecciona un estudiante')] + [
        (e['id'], f"{e['nombre']} ({e['matricula']})") for e in estudiantes
    ]


def _render_formulario(form, criteria, puntajes, nota_final, retroalimentacion=None):
    valores = {p['criterio_id']: p['puntaje'] for p in puntajes}
    return render_template(
        'views/evaluar.html',
        form=form,
        criterios=criteria,
        valores=valores,
        nota_final=nota_final,
        completa=is_evaluation_complete(puntajes, criteria),
        retroalimentacion=retroalimentacion,
    )


@evaluaciones_bp.route('/nueva', methods=['GET', 'POST'])
def nueva():
    estudiantes = persistencia_service.snapshot_once(persistencia_service.subscribe_students)
    form = EvaluacionForm()
    form.estudiante.choices = _opciones_estudiantes(estudiantes)

    if request.method == 'GET':
        # Cambio de semestre o estudiante desde la propia página
        semestre = request.args.get('semestre')
        form.semestre.data = semestre if semestre in SEMESTRES else SEMESTRES[0]
        estudiante_id = request.args.get('estudiante', type=int)
        if estudiante_id:
            form.estudiante.data = estudiante_id

    criteria = criteria_for(form.semestre.data)
    puntajes = initial_scores(criteria)

    if not form.validate_on_submit():
        for errores in form.errors.values():
            flash(errores[0], 'warning')
        return _render_formulario(form, criteria, puntajes, 0.0)

    try:
        puntajes = parse_puntajes(request.form, criteria)
    except ValidationFailed as e:
        flash(e.message, 'danger')
        return _render_formulario(form, criteria, puntajes, 0.0)

    nota_final = compute_final_score(puntajes, criteria)

    if form.generar.data:
        estudiante = next(e for e in estudiantes if e['id'] == form.estudiante.data)
        borrador = {'semestre': form.semestre.data, 'puntajes': puntajes, 'nota_final': nota_final}
        resultado = generate_feedback(estudiante, borrador, criteria)
        if not resultado.ok:
            flash(resultado.texto, 'warning')
        return _render_formulario(form, criteria, puntajes, nota_final, retroalimentacion=resultado)

    if not is_evaluation_complete(puntajes, criteria):
        flash('Por favor, completa todos los criterios antes de guardar.', 'warning')
        return _render_formulario(form, criteria, puntajes, nota_final)

    try:
        persistencia_service.create_evaluation({
            'estudiante_id': form.estudiante.data,
            'profesor_id': g.sesion.user['id'],
            'semestre': form.semestre.data,
            'puntajes': puntajes,
            'nota_final': nota_final,
        })
    except ServiceUnavailable:
        raise
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error al guardar evaluación: {str(e)}", exc_info=True)
        flash('Error al guardar la evaluación', 'danger')
        return _render_formulario(form, criteria, puntajes, nota_final)

    flash('Evaluación guardada exitosamente.', 'success')
    return redirect(url_for('evaluaciones.nueva', semestre=form.semestre.data))


# --- Endpoints de API para AJAX ---

def _leer_borrador(datos):
    if not isinstance(datos, dict):
        raise ValidationFailed('Datos de evaluación inválidos.')
    semestre = datos.get('semestre')
    if semestre not in SEMESTRES:
        raise ValidationFailed('Semestre no válido.')
    criteria = criteria_for(semestre)
    crudos = datos.get('puntajes') or {}
    if not isinstance(crudos, dict):
        raise ValidationFailed('Los puntajes deben enviarse por criterio.')
    puntajes = parse_puntajes(crudos, criteria, prefijo='')
    return semestre, criteria, puntajes


def _leer_estudiante_id(datos):
    try:
        return int(datos.get('estudiante_id'))
    except (TypeError, ValueError):
        raise ValidationFailed('Por favor, selecciona un estudiante.')


@evaluaciones_bp.route('/api/nota-final', methods=['POST'])
def api_nota_final():
    """Nota ponderada en vivo para el formulario de evaluación."""
    datos = request.get_json(silent=True) or {}
    try:
        _, criteria, puntajes = _leer_borrador(datos)
    except ValidationFailed as e:
        return jsonify({'error': e.message}), 400

    nota_final = compute_final_score(puntajes, criteria)
    return jsonify({
        'nota_final': nota_final,
        'nota_formateada': f"{nota_final:.2f}",
        'completa': is_evaluation_complete(puntajes, criteria),
    })


@evaluaciones_bp.route('/api/retroalimentacion', methods=['POST'])
def api_retroalimentacion():
    datos = request.get_json(silent=True) or {}
    try:
        semestre, criteria, puntajes = _leer_borrador(datos)
        estudiante_id = _leer_estudiante_id(datos)
    except ValidationFailed as e:
        return jsonify({'error': e.message}), 400

    estudiantes = persistencia_service.snapshot_once(persistencia_service.subscribe_students)
    estudiante = next((e for e in estudiantes if e['id'] == estudiante_id), None)
    if estudiante is None:
        return jsonify({'error': 'Por favor, selecciona un estudiante.'}), 404

    borrador = {
        'semestre': semestre,
        'puntajes': puntajes,
        'nota_final': compute_final_score(puntajes, criteria),
    }
    resultado = generate_feedback(estudiante, borrador, criteria)
    return jsonify({
        'ok': resultado.ok,
        'texto': resultado.texto,
        'motivo': getattr(resultado, 'motivo', None),
    })
