from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Email, Length, ValidationError, EqualTo
from config import Config
from sepi.services.identidad_service import find_account

MIN_PASSWORD = Config.MIN_PASSWORD_LENGTH
MENSAJE_PASSWORD_CORTA = f"La contraseña debe tener al menos {MIN_PASSWORD} caracteres."

# --- Formulario de Login ---
class LoginForm(FlaskForm):
    email = StringField('Correo Electrónico', validators=[
        DataRequired(message="El correo es obligatorio."),
        Email(message="Por favor, introduce una dirección de correo válida.")
    ])
    password = PasswordField('Contraseña', validators=[DataRequired(message="La contraseña es obligatoria.")])
    remember = BooleanField('Recordarme')
    submit = SubmitField('Entrar')

# --- Formulario del primer administrador ---
class PrimerAdminForm(FlaskForm):
    nombre = StringField('Nombre completo', validators=[DataRequired(message="El nombre es obligatorio."), Length(max=120)])
    email = StringField('Correo Electrónico', validators=[
        DataRequired(message="El correo es obligatorio."),
        Email(message="Por favor, introduce una dirección de correo válida."),
        Length(max=120)
    ])
    password = PasswordField('Contraseña', validators=[
        DataRequired(message="La contraseña es obligatoria."),
        Length(min=MIN_PASSWORD, message=MENSAJE_PASSWORD_CORTA)
    ])
    submit = SubmitField('Crear Cuenta de Administrador')

# --- Formulario para alta de profesores (Admin) ---
class ProfesorForm(FlaskForm):
    nombre = StringField('Nombre completo', validators=[DataRequired(message="El nombre es obligatorio."), Length(max=120)])
    email = StringField('Correo Electrónico', validators=[
        DataRequired(message="El correo es obligatorio."),
        Email(message="Por favor, introduce una dirección de correo válida."),
        Length(max=120)
    ])
    password = PasswordField('Contraseña', validators=[
        DataRequired(message="La contraseña es obligatoria."),
        Length(min=MIN_PASSWORD, message=MENSAJE_PASSWORD_CORTA)
    ])
    submit = SubmitField('Guardar Profesor')

    def validate_email(self, field):
        if find_account(field.data):
            raise ValidationError('Este email ya está registrado')

# --- Formularios de ajustes ---
class NombreForm(FlaskForm):
    nombre = StringField('Nombre', validators=[DataRequired(message="El nombre no puede estar vacío."), Length(max=120)])
    submit = SubmitField('Guardar')

    def validate_nombre(self, field):
        if not (field.data or '').strip():
            raise ValidationError('El nombre no puede estar vacío.')

class ContrasenaForm(FlaskForm):
    password = PasswordField('Nueva Contraseña', validators=[
        DataRequired(message="La contraseña es obligatoria."),
        Length(min=MIN_PASSWORD, message=MENSAJE_PASSWORD_CORTA)
    ])
    confirm_password = PasswordField('Confirmar Nueva Contraseña', validators=[
        DataRequired(message="Confirma la nueva contraseña."),
        EqualTo('password', message='Las contraseñas no coinciden.')
    ])
    submit = SubmitField('Cambiar Contraseña')
