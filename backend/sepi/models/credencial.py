from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy.orm import validates
from datetime import datetime
from sepi.extensions import db


class Credencial(UserMixin, db.Model):
    """Cuenta de acceso (principal de identidad).

    El perfil de la aplicación vive en ``usuarios`` con el mismo id.
    """
    __tablename__ = 'credenciales'

    uid = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    creado_en = db.Column(db.DateTime, default=datetime.utcnow)
    ultimo_acceso = db.Column(db.DateTime, nullable=True)

    @validates('email')
    def validate_email(self, key, email):
        if not email or '@' not in email:
            raise ValueError("Debe proporcionar un email válido")
        return email.lower().strip()

    def set_password(self, password):
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def registrar_acceso(self):
        self.ultimo_acceso = datetime.utcnow()

    # Método requerido por Flask-Login
    def get_id(self):
        return str(self.uid)

    def __repr__(self):
        return f'<Credencial {self.email}>'
