import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db, login_manager
from services.errors import ApiError, UnauthorizedError


migrate = Migrate()


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    # -------------------------
    # Extensiones
    # -------------------------
    db.init_app(app)
    migrate.init_app(app, db)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login_get"

    @login_manager.unauthorized_handler
    def _unauthorized():
        if request.path.startswith("/api/"):
            raise UnauthorizedError("Authentication required")
        flash("Sign in to continue.", "error")
        return redirect(url_for("auth.login_get", next=request.path))

    # -------------------------
    # Importar modelos (Alembic)
    # -------------------------
    from models.company import CompanyMaster  # noqa: F401
    from models.relationship import CompanyRelationship  # noqa: F401
    from models.user import UserMaster  # noqa: F401
    from models.designation import DesignationMaster, DesignationPermission, PermissionMaster  # noqa: F401
    from models.membership import UserCompanyAssignment  # noqa: F401
    from models.service import CompanyService, ServiceMaster  # noqa: F401

    # -------------------------
    # Blueprints
    # -------------------------
    from routes import auth, context, main  # noqa: F401  (registran vistas en los blueprints)
    from routes import auth_bp, context_bp, main_bp
    from routes.admin import admin_bp
    from routes.api_companies import api_companies_bp
    from routes.api_navigation import api_navigation_bp
    from routes.api_relationships import api_relationships_bp
    from routes.api_services import api_services_bp
    from routes.settings import settings_bp

    blueprints = [
        auth_bp,
        context_bp,
        main_bp,
        settings_bp,

        # Admin (páginas)
        admin_bp,

        # API JSON
        api_companies_bp,
        api_relationships_bp,
        api_services_bp,
        api_navigation_bp,
    ]

    for bp in blueprints:
        app.register_blueprint(bp)

    _configure_logging(app)
    register_error_handlers(app)

    return app


def _configure_logging(app: Flask) -> None:
    log_dir = app.config.get("LOG_DIR") or os.path.join(os.path.dirname(__file__), "logs")
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "app.log"),
        maxBytes=2_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ))

    if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
        app.logger.addHandler(file_handler)
    app.logger.setLevel(level)


def register_error_handlers(app: Flask) -> None:
    """Único punto que traduce errores a respuestas (JSON en /api, HTML en páginas)."""

    @app.errorhandler(ApiError)
    def _handle_api_error(e: ApiError):
        if e.status_code >= 500:
            app.logger.error("%s %s -> %s", request.method, request.path, e.message)
        else:
            app.logger.info("%s %s -> %s %s", request.method, request.path, e.status_code, e.message)

        if request.path.startswith("/api/"):
            return jsonify(e.to_dict()), e.status_code
        return render_template("error.html", message=e.message), e.status_code

    @app.errorhandler(HTTPException)
    def _handle_http(e: HTTPException):
        if request.path.startswith("/api/"):
            return jsonify({"error": e.description or e.name}), e.code
        if e.code == 404:
            return render_template("404.html"), 404
        if e.code == 403:
            flash("You do not have permission to access this page.", "error")
            return render_template("error.html", message="Access denied."), 403
        return e

    @app.errorhandler(Exception)
    def _handle_unexpected(e: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled error: %s %s", request.method, request.path)
        if request.path.startswith("/api/"):
            return jsonify({"error": "Internal server error"}), 500
        flash("An internal error occurred. The problem has been logged.", "error")
        return render_template("error.html", message=None), 500


app = create_app()


if __name__ == "__main__":
    # Debug controlado por config / variables de entorno
    app.run(debug=app.config.get("DEBUG", False))
