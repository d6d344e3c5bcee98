from .credencial import Credencial
from .user import User
from .estudiante import Estudiante
from .evaluacion import Evaluacion


__all__=[
         'Credencial',
         'User',
         'Estudiante',
         'Evaluacion',
         ]
