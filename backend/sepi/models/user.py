from sqlalchemy import Enum
from sqlalchemy.orm import validates
from datetime import datetime
from sepi.extensions import db


class User(db.Model):
    """Perfil de profesor o administrador.

    ``id`` es el ``uid`` de la credencial con la que inicia sesión. No hay llave
    foránea: una credencial sin perfil es un estado inválido que la sesión detecta.
    """
    __tablename__ = 'usuarios'

    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    nombre = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    rol = db.Column(Enum('admin', 'profesor', name='user_roles'), nullable=False, default='profesor')
    creado_en = db.Column(db.DateTime, default=datetime.utcnow)

    @validates('email')
    def validate_email(self, key, email):
        if not email or '@' not in email:
            raise ValueError("Debe proporcionar un email válido")
        return email.lower().strip()

    def is_admin(self):
        return self.rol == 'admin'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'email': self.email,
            'rol': self.rol,
        }

    def __repr__(self):
        return f'<User {self.email}>'
