from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from models import db
from models.company import CompanyMaster, CompanyStatus, CompanyType
from models.relationship import RelationshipStatus, RelationshipType
from routes.guards import get_current_context, require_permission
from services.companies import create_company, deactivate_company, list_companies, update_company
from services.company_services import services_for_company, set_company_service
from services.errors import ApiError
from services.permissions import accessible_section
from services.relationships import (
    create_relationship,
    deactivate_relationship,
    list_relationships,
    update_relationship,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

# RADIAN existe una sola vez (seed); desde la UI no se crean más
COMPANY_TYPES_FOR_FORM = (CompanyType.MERCHANT, CompanyType.SUPPLIER, CompanyType.BROKER)


def _clean_str(value: str | None) -> str:
    return (value or "").strip()


def _all_companies():
    return (
        db.session.query(CompanyMaster)
        .order_by(CompanyMaster.company_name.asc())
        .all()
    )


def _fail(e: ApiError):
    db.session.rollback()
    current_app.logger.info("%s %s -> %s %s", request.method, request.path, e.status_code, e.message)
    flash(e.message, "error")


@admin_bp.get("")
@login_required
@require_permission("admin.companies")
def index():
    ctx = get_current_context()
    return render_template(
        "section.html",
        title="Admin",
        section=accessible_section(ctx.permissions, "/admin"),
    )


# =========================
# EMPRESAS
# =========================
@admin_bp.get("/companies")
@login_required
@require_permission("admin.companies")
def companies_list():
    return render_template(
        "admin_companies.html",
        rows=list_companies(db.session),
        company_types=COMPANY_TYPES_FOR_FORM,
        statuses=(CompanyStatus.ACTIVE, CompanyStatus.INACTIVE),
    )


@admin_bp.post("/companies")
@login_required
@require_permission("admin.companies")
def companies_create():
    try:
        company = create_company(
            db.session,
            company_name=_clean_str(request.form.get("company_name")),
            company_type=_clean_str(request.form.get("company_type")),
            is_client=request.form.get("is_client") == "1",
        )
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.companies_list"))

    current_app.logger.info("Company created: %s (%s)", company.company_id, company.company_type)
    flash(f"Company {company.company_name} created.", "success")
    return redirect(url_for("admin.companies_list"))


@admin_bp.post("/companies/<company_id>")
@login_required
@require_permission("admin.companies")
def companies_update(company_id: str):
    try:
        company = update_company(
            db.session,
            company_id,
            company_name=_clean_str(request.form.get("company_name")),
            company_status=_clean_str(request.form.get("company_status")),
            is_client=request.form.get("is_client") == "1",
        )
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.companies_list"))

    current_app.logger.info("Company %s updated", company.company_id)
    flash(f"Company {company.company_name} updated.", "success")
    return redirect(url_for("admin.companies_list"))


@admin_bp.post("/companies/<company_id>/deactivate")
@login_required
@require_permission("admin.companies")
def companies_deactivate(company_id: str):
    try:
        company = deactivate_company(db.session, company_id)
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.companies_list"))

    current_app.logger.info("Company %s deactivated", company.company_id)
    flash(f"Company {company.company_name} deactivated.", "success")
    return redirect(url_for("admin.companies_list"))


# =========================
# RELACIONES
# =========================
@admin_bp.get("/relationships")
@login_required
@require_permission("admin.relationships")
def relationships_list():
    return render_template(
        "admin_relationships.html",
        rows=list_relationships(db.session),
        companies=_all_companies(),
        relationship_types=RelationshipType.ORDERED,
        statuses=(RelationshipStatus.ACTIVE, RelationshipStatus.PENDING, RelationshipStatus.INACTIVE),
    )


@admin_bp.post("/relationships")
@login_required
@require_permission("admin.relationships")
def relationships_create():
    try:
        rel = create_relationship(
            db.session,
            from_company_id=_clean_str(request.form.get("from_company_id")),
            to_company_id=_clean_str(request.form.get("to_company_id")),
            relationship_type=request.form.get("relationship_type"),
        )
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.relationships_list"))

    current_app.logger.info(
        "Relationship created: %s %s -> %s",
        rel.relationship_type, rel.from_company_id, rel.to_company_id,
    )
    flash(f"Relationship {rel.display_name} created.", "success")
    return redirect(url_for("admin.relationships_list"))


@admin_bp.post("/relationships/<relationship_id>/status")
@login_required
@require_permission("admin.relationships")
def relationships_status(relationship_id: str):
    try:
        rel = update_relationship(
            db.session,
            relationship_id,
            relationship_status=request.form.get("relationship_status"),
        )
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.relationships_list"))

    current_app.logger.info("Relationship %s status=%s", rel.company_relationship_id, rel.relationship_status)
    flash(f"{rel.display_name} is now {rel.relationship_status}.", "success")
    return redirect(url_for("admin.relationships_list"))


@admin_bp.post("/relationships/<relationship_id>/deactivate")
@login_required
@require_permission("admin.relationships")
def relationships_deactivate(relationship_id: str):
    try:
        rel, deactivated = deactivate_relationship(db.session, relationship_id)
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.relationships_list"))

    current_app.logger.info(
        "Relationship %s deactivated (%d assignments)", rel.company_relationship_id, deactivated
    )
    flash(f"{rel.display_name} deactivated. {deactivated} user assignment(s) deactivated.", "success")
    return redirect(url_for("admin.relationships_list"))


# =========================
# SERVICIOS POR EMPRESA
# =========================
@admin_bp.get("/services")
@login_required
@require_permission("admin.services")
def services_list():
    company_id = _clean_str(request.args.get("companyId")) or None

    selected = db.session.get(CompanyMaster, company_id) if company_id else None
    return render_template(
        "admin_services.html",
        companies=_all_companies(),
        selected=selected,
        services=services_for_company(db.session, company_id),
    )


@admin_bp.post("/services")
@login_required
@require_permission("admin.services")
def services_toggle():
    company_id = _clean_str(request.form.get("company_id"))
    try:
        cs = set_company_service(
            db.session,
            company_id=company_id,
            service_id=_clean_str(request.form.get("service_id")),
            is_enabled=request.form.get("is_enabled") == "1",
        )
        db.session.commit()
    except ApiError as e:
        _fail(e)
        return redirect(url_for("admin.services_list", companyId=company_id or None))

    current_app.logger.info(
        "Service %s %s for company %s",
        cs.service_id, "enabled" if cs.is_enabled else "disabled", cs.company_id,
    )
    flash(f"{cs.service.service_name} {'enabled' if cs.is_enabled else 'disabled'}.", "success")
    return redirect(url_for("admin.services_list", companyId=company_id))
