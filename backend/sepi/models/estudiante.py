from sepi.extensions import db
from datetime import datetime


class Estudiante(db.Model):
    __tablename__ = 'estudiantes'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(150), nullable=False)
    matricula = db.Column(db.String(50), nullable=False)
    creado_en = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'matricula': self.matricula,
        }

    def __repr__(self):
        return f'<Estudiante {self.nombre}>'
