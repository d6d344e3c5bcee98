from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length


class EstudianteForm(FlaskForm):
    nombre = StringField('Nombre completo', validators=[DataRequired(message="Por favor, completa todos los campos."), Length(max=150)])
    matricula = StringField('Matrícula', validators=[DataRequired(message="Por favor, completa todos los campos."), Length(max=50)])
    submit = SubmitField('Guardar Estudiante')
