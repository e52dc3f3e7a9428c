"""Errores de negocio con su código HTTP.

Los servicios lanzan estas excepciones; ``register_error_handlers`` en
``app.py`` es el único lugar que las traduce a respuestas.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(ApiError):
    status_code = 400


class DuplicateError(ValidationError):
    """Recurso ya existente. Se responde 400, igual que una validación."""


class NotFoundError(ApiError):
    status_code = 404


class UnauthorizedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403
