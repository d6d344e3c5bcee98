from sepi.extensions import db


class Evaluacion(db.Model):
    __tablename__ = 'evaluaciones'

    id = db.Column(db.Integer, primary_key=True)
    estudiante_id = db.Column(db.Integer, nullable=False, index=True)
    profesor_id = db.Column(db.Integer, nullable=False, index=True)
    semestre = db.Column(db.String(50), nullable=False)
    # Reloj de la base de datos, no del cliente
    fecha = db.Column(db.DateTime, nullable=False, server_default=db.func.now(), index=True)
    puntajes = db.Column(db.JSON, nullable=False, default=list)
    nota_final = db.Column(db.Float, nullable=False)

    def __repr__(self):
        return f'<Evaluacion {self.id}>'
