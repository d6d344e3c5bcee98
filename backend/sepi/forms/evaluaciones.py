from flask_wtf import FlaskForm
from wtforms import SelectField, SubmitField
from wtforms.validators import DataRequired, ValidationError
from sepi.rubricas import SEMESTRES
from sepi.services.errores import ValidationFailed

PUNTAJE_MIN = 0
PUNTAJE_MAX = 10
PASO_PUNTAJE = 0.5


def _entero_o_none(valor):
    if valor in (None, ''):
        return None
    return int(valor)


class EvaluacionForm(FlaskForm):
    estudiante = SelectField('Estudiante', coerce=_entero_o_none, validate_choice=False)
    semestre = SelectField('Semestre', choices=[(s, s) for s in SEMESTRES], validators=[DataRequired()])
    guardar = SubmitField('Guardar Evaluación')
    generar = SubmitField('Generar Retroalimentación')

    def validate_estudiante(self, field):
        if not field.data:
            raise ValidationError('Por favor, selecciona un estudiante.')
        if field.data not in {valor for valor, _ in self.estudiante.choices}:
            raise ValidationError('El estudiante seleccionado no existe.')


def parse_puntajes(datos, criteria, prefijo='puntaje_'):
    """Lee un puntaje por criterio desde ``datos`` (form o dict JSON).

    Los criterios sin valor quedan en 0. Los valores deben estar entre 0 y 10
    en pasos de 0.5.
    """
    puntajes = []
    for criterio in criteria:
        crudo = datos.get(f'{prefijo}{criterio.id}', 0)
        try:
            puntaje = float(crudo if crudo not in (None, '') else 0)
        except (TypeError, ValueError):
            raise ValidationFailed(f"Puntaje inválido para '{criterio.nombre}'.")

        if not PUNTAJE_MIN <= puntaje <= PUNTAJE_MAX:
            raise ValidationFailed(f"El puntaje de '{criterio.nombre}' debe estar entre {PUNTAJE_MIN} y {PUNTAJE_MAX}.")
        if (puntaje / PASO_PUNTAJE) != int(puntaje / PASO_PUNTAJE):
            raise ValidationFailed(f"El puntaje de '{criterio.nombre}' debe ir en pasos de {PASO_PUNTAJE}.")

        puntajes.append({'criterio_id': criterio.id, 'puntaje': puntaje})
    return puntajes
