from flask import Blueprint, current_app, jsonify
from flask_login import login_required

from models import db
from routes.guards import json_body, require_permission
from services.companies import (
    company_detail,
    company_list_item,
    create_company,
    deactivate_company,
    get_company_detail,
    list_companies,
    update_company,
)

api_companies_bp = Blueprint("api_companies", __name__, url_prefix="/api/companies")


@api_companies_bp.get("")
@login_required
@require_permission("admin.companies")
def list_all():
    return jsonify([company_list_item(c, counts) for c, counts in list_companies(db.session)])


@api_companies_bp.post("")
@login_required
@require_permission("admin.companies")
def create():
    body = json_body()
    company = create_company(
        db.session,
        company_name=body.get("companyName"),
        company_type=body.get("companyType"),
        is_client=body.get("isClient"),
    )
    db.session.commit()

    current_app.logger.info("Company created: %s (%s)", company.company_id, company.company_type)
    return jsonify(company.to_dict()), 201


@api_companies_bp.get("/<company_id>")
@login_required
@require_permission("admin.companies")
def get_one(company_id: str):
    company = get_company_detail(db.session, company_id)
    return jsonify(company_detail(db.session, company))


@api_companies_bp.put("/<company_id>")
@login_required
@require_permission("admin.companies")
def update(company_id: str):
    body = json_body()
    company = update_company(
        db.session,
        company_id,
        company_name=body.get("companyName"),
        company_type=body.get("companyType"),
        is_client=body.get("isClient"),
        company_status=body.get("companyStatus"),
    )
    db.session.commit()

    current_app.logger.info("Company %s updated", company.company_id)
    return jsonify(company.to_dict())


@api_companies_bp.delete("/<company_id>")
@login_required
@require_permission("admin.companies")
def soft_delete(company_id: str):
    company = deactivate_company(db.session, company_id)
    db.session.commit()

    current_app.logger.info("Company %s deactivated", company.company_id)
    return jsonify({"message": "Company deactivated successfully", "company": company.to_dict()})
