from flask import redirect, render_template, session, url_for
from flask_login import current_user, login_required

from models import db
from models.relationship import CompanyRelationship, RelationshipStatus
from models.service import CompanyService
from routes import main_bp
from routes.guards import get_current_context, require_context, require_permission


# Datos de ejemplo: la página de deals solo demuestra la UI por permisos
MOCK_DEALS = [
    {"id": 1, "name": "Deal #001", "supplier": "Coca-Cola", "status": "Active", "amount": "$50,000"},
    {"id": 2, "name": "Deal #002", "supplier": "KeHE Distributors", "status": "Pending", "amount": "$35,000"},
    {"id": 3, "name": "Deal #003", "supplier": "Belvita", "status": "Approved", "amount": "$25,000"},
]

DEAL_STATUS_BADGES = {
    "Active": "badge-green",
    "Pending": "badge-yellow",
}


def _dashboard_payload(company_id: str) -> dict:
    """Resumen de la empresa del contexto activo."""
    active_relationships = (
        db.session.query(CompanyRelationship.company_relationship_id)
        .filter(
            (CompanyRelationship.from_company_id == company_id)
            | (CompanyRelationship.to_company_id == company_id),
            CompanyRelationship.relationship_status == RelationshipStatus.ACTIVE,
        )
        .count()
    )
    enabled_services = (
        db.session.query(CompanyService.company_service_id)
        .filter(CompanyService.company_id == company_id, CompanyService.is_enabled.is_(True))
        .count()
    )
    return {
        "active_relationships": active_relationships,
        "enabled_services": enabled_services,
    }


@main_bp.get("/")
@login_required
def home():
    if not session.get("assignment_id"):
        return redirect(url_for("context.select_context"))
    return redirect(url_for("main.dashboard"))


@main_bp.get("/dashboard")
@login_required
@require_context()
def dashboard():
    ctx = get_current_context()
    return render_template(
        "dashboard.html",
        user=current_user,
        stats=_dashboard_payload(ctx.company_id),
    )


@main_bp.get("/deals")
@login_required
@require_permission("deals.view")
def deals():
    deals = [
        {**d, "badge": DEAL_STATUS_BADGES.get(d["status"], "badge-blue")}
        for d in MOCK_DEALS
    ]
    return render_template("deals.html", deals=deals)


MOCK_REPORTS = [
    {"id": 1, "name": "Monthly Sales Report", "type": "PDF", "date": "2024-12-01"},
    {"id": 2, "name": "Supplier Performance", "type": "CSV", "date": "2024-11-30"},
    {"id": 3, "name": "Deal Analytics", "type": "PDF", "date": "2024-11-28"},
]


@main_bp.get("/reports")
@login_required
@require_permission("reports.view")
def reports():
    return render_template("reports.html", reports=MOCK_REPORTS)
