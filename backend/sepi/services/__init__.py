from .errores import (
    SepiError,
    ServiceUnavailable,
    AuthenticationFailed,
    EmailAlreadyInUse,
    PermissionDenied,
    NotFound,
    ValidationFailed,
)

__all__ = [
    'SepiError',
    'ServiceUnavailable',
    'AuthenticationFailed',
    'EmailAlreadyInUse',
    'PermissionDenied',
    'NotFound',
    'ValidationFailed',
]
