from flask import flash, g, redirect, render_template, request, session, url_for
from flask_login import current_user, login_required

from models import db
from routes import context_bp
from routes.guards import get_current_context
from services.access import (
    active_assignments,
    build_context,
    find_active_assignment,
    icon_glyph,
    permission_gate,
    sidebar_items,
)


def _set_context(assignment_id: str):
    session["assignment_id"] = assignment_id


def _clear_context():
    session.pop("assignment_id", None)


@context_bp.before_app_request
def load_context():
    """Resuelve la asignación guardada en sesión y la deja en g para esta petición."""
    g.current_context = None
    if not current_user.is_authenticated:
        return

    assignment_id = session.get("assignment_id")
    if not assignment_id:
        return

    assignment = find_active_assignment(db.session, current_user.user_id, assignment_id)
    if not assignment:
        # Asignación desactivada (ej. baja de la relación): se obliga a elegir de nuevo
        _clear_context()
        return

    g.current_context = build_context(assignment)


@context_bp.app_context_processor
def inject_context():
    ctx = get_current_context()

    def can(*permissions, require_all=False):
        return permission_gate(ctx, permissions=permissions, require_all=require_all)

    routes = ctx.accessible_routes if ctx else []
    return {
        "current_context": ctx,
        "can": can,
        "icon_glyph": icon_glyph,
        "sidebar": sidebar_items(routes, request.path),
    }


@context_bp.get("/select-context")
@login_required
def select_context():
    assignments = active_assignments(db.session, current_user.user_id)

    if not assignments:
        flash("Your user has no company assignments. Contact your administrator.", "error")
        return render_template("select_context.html", assignments=[])

    # Una sola asignación: entra directo
    if len(assignments) == 1:
        _set_context(assignments[0].user_company_assignment_id)
        return redirect(url_for("main.dashboard"))

    contexts = [build_context(a) for a in assignments]
    return render_template("select_context.html", assignments=contexts)


@context_bp.post("/select-context")
@login_required
def select_context_post():
    assignment_id = (request.form.get("assignment_id") or "").strip()
    if not assignment_id:
        flash("Select a company context.", "error")
        return redirect(url_for("context.select_context"))

    assignment = find_active_assignment(db.session, current_user.user_id, assignment_id)
    if not assignment:
        flash("You do not have access to that context.", "error")
        return redirect(url_for("context.select_context"))

    _set_context(assignment.user_company_assignment_id)
    return redirect(url_for("main.dashboard"))


@context_bp.post("/clear-context")
@login_required
def clear_context():
    _clear_context()
    flash("Context cleared. Select a company to continue.", "info")
    return redirect(url_for("context.select_context"))
