"""
Excepciones de la capa de servicios
"""
from typing import Any, Dict, Optional


class SepiError(Exception):
    """Excepción base de SEPI"""

    error_code = "SEPI_ERROR"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class ServiceUnavailable(SepiError):
    """No hay conexión con la base de datos"""

    error_code = "SERVICE_UNAVAILABLE"

    def __init__(self, message: str = "No es posible conectar con la base de datos.", extra=None):
        super().__init__(message, extra)


class AuthenticationFailed(SepiError):
    """Credenciales incorrectas o sesión inexistente"""

    error_code = "AUTHENTICATION_FAILED"


class EmailAlreadyInUse(SepiError):
    """El correo ya tiene una cuenta de acceso"""

    error_code = "EMAIL_ALREADY_IN_USE"

    def __init__(self, email: str):
        super().__init__(f"El correo '{email}' ya está registrado", extra={"email": email})


class PermissionDenied(SepiError):
    """Operación no permitida en el estado actual"""

    error_code = "PERMISSION_DENIED"


class NotFound(SepiError):
    """Registro no encontrado"""

    error_code = "NOT_FOUND"


class ValidationFailed(SepiError):
    """Datos de entrada inválidos"""

    error_code = "VALIDATION_FAILED"
