import os
import sys

# Añadir el directorio 'backend' al path de Python para que encuentre el paquete 'sepi'
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'backend'))

from sepi import create_app

# Crear la instancia de la aplicación para que Gunicorn la pueda usar
app = create_app()

if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'])
