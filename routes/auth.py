from flask import current_app, flash, redirect, render_template, request, session, url_for
from flask_login import current_user, login_required, login_user, logout_user

from models import db
from models.user import UserMaster, UserStatus
from routes import auth_bp


def _safe_next(target: str | None) -> str | None:
    # Solo rutas internas
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


@auth_bp.get("/login")
def login_get():
    if current_user.is_authenticated:
        return redirect(url_for("context.select_context"))
    return render_template("login.html", next=_safe_next(request.args.get("next")))


@auth_bp.post("/login")
def login_post():
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""

    user = (
        db.session.query(UserMaster)
        .filter(UserMaster.email == email, UserMaster.status == UserStatus.ACTIVE)
        .first()
    )
    if not user or not user.check_password(password):
        current_app.logger.info("Failed login for %s", email or "<empty>")
        flash("Invalid credentials", "error")
        return redirect(url_for("auth.login_get"))

    login_user(user)
    current_app.logger.info("User %s signed in", user.user_id)

    # El contexto se elige de nuevo en cada login
    session.pop("assignment_id", None)

    return redirect(_safe_next(request.form.get("next")) or url_for("context.select_context"))


@auth_bp.get("/logout")
@login_required
def logout():
    current_app.logger.info("User %s signed out", current_user.user_id)
    logout_user()
    session.clear()
    return redirect(url_for("auth.login_get"))
