from .usuarios import LoginForm, PrimerAdminForm, ProfesorForm, NombreForm, ContrasenaForm
from .estudiantes import EstudianteForm
from .evaluaciones import EvaluacionForm, parse_puntajes

__all__ = [
    'LoginForm',
    'PrimerAdminForm',
    'ProfesorForm',
    'NombreForm',
    'ContrasenaForm',
    'EstudianteForm',
    'EvaluacionForm',
    'parse_puntajes',
]
