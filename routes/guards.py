from functools import wraps

from flask import flash, g, redirect, request, url_for

from services.access import CurrentContext, permission_gate
from services.errors import ForbiddenError, ValidationError


def is_api_request() -> bool:
    return request.path.startswith("/api/")


def json_body() -> dict:
    """Body JSON de la petición; debe ser un objeto."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")
    return body


def get_current_context() -> CurrentContext | None:
    """Contexto resuelto para esta petición (ver routes.context.load_context)."""
    return g.get("current_context")


def require_context():
    """Obliga a que exista una asignación (empresa + cargo) seleccionada."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if get_current_context() is None:
                if is_api_request():
                    raise ForbiddenError("No active company context")
                flash("Select a company context to continue.", "error")
                return redirect(url_for("context.select_context"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def require_permission(*permissions, require_all: bool = False):
    """Valida:

    - Contexto seleccionado
    - El cargo del contexto tiene el permiso (uno de ellos, o todos con require_all)
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            ctx = get_current_context()
            if ctx is None:
                if is_api_request():
                    raise ForbiddenError("No active company context")
                flash("Select a company context to continue.", "error")
                return redirect(url_for("context.select_context"))

            if not permission_gate(ctx, permissions=permissions, require_all=require_all):
                if is_api_request():
                    raise ForbiddenError("You do not have permission to perform this action")
                flash("You do not have permission to access this section.", "error")
                return redirect(url_for("main.dashboard"))

            return fn(*args, **kwargs)

        return wrapper

    return decorator
