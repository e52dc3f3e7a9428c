from flask import Blueprint, render_template
from flask_login import login_required
from sqlalchemy import func
from sqlalchemy.orm import joinedload, selectinload

from models import db
from models.company import CompanyMaster
from models.designation import DesignationMaster, DesignationPermission
from models.membership import UserCompanyAssignment
from models.relationship import CompanyRelationship
from models.service import CompanyService
from routes.guards import get_current_context, require_context, require_permission
from services.permissions import accessible_section

settings_bp = Blueprint("settings", __name__, url_prefix="/settings")


@settings_bp.get("")
@login_required
@require_context()
def index():
    ctx = get_current_context()
    return render_template(
        "section.html",
        title="Settings",
        section=accessible_section(ctx.permissions, "/settings"),
    )


# =========================
# USUARIOS DE LA EMPRESA
# =========================
@settings_bp.get("/users")
@login_required
@require_permission("users.view")
def users():
    ctx = get_current_context()
    assignments = (
        db.session.query(UserCompanyAssignment)
        .options(
            joinedload(UserCompanyAssignment.user),
            joinedload(UserCompanyAssignment.designation),
            joinedload(UserCompanyAssignment.company_relationship).joinedload(CompanyRelationship.from_company),
            joinedload(UserCompanyAssignment.company_relationship).joinedload(CompanyRelationship.to_company),
        )
        .filter(UserCompanyAssignment.company_id == ctx.company_id)
        .order_by(UserCompanyAssignment.created_at.asc())
        .all()
    )
    return render_template("settings_users.html", assignments=assignments)


# =========================
# CARGOS
# =========================
@settings_bp.get("/roles")
@login_required
@require_permission("roles.view")
def roles():
    ctx = get_current_context()
    designations = (
        db.session.query(DesignationMaster)
        .options(selectinload(DesignationMaster.permissions).joinedload(DesignationPermission.permission))
        .filter(DesignationMaster.company_id == ctx.company_id)
        .order_by(DesignationMaster.designation_name.asc())
        .all()
    )
    user_counts = dict(
        db.session.query(UserCompanyAssignment.designation_id, func.count(UserCompanyAssignment.user_company_assignment_id))
        .filter(UserCompanyAssignment.company_id == ctx.company_id)
        .group_by(UserCompanyAssignment.designation_id)
        .all()
    )
    return render_template("settings_roles.html", designations=designations, user_counts=user_counts)


# =========================
# EMPRESA
# =========================
@settings_bp.get("/company")
@login_required
@require_permission("company.settings")
def company():
    ctx = get_current_context()
    company = db.session.get(CompanyMaster, ctx.company_id)
    enabled = (
        db.session.query(CompanyService)
        .options(joinedload(CompanyService.service))
        .filter(CompanyService.company_id == ctx.company_id, CompanyService.is_enabled.is_(True))
        .all()
    )
    return render_template(
        "settings_company.html",
        company=company,
        services=sorted((cs.service for cs in enabled), key=lambda s: s.service_name),
    )
