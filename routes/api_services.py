from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from models import db
from routes.guards import json_body, require_permission
from services.company_services import services_for_company, set_company_service

api_services_bp = Blueprint("api_services", __name__, url_prefix="/api/services")


@api_services_bp.get("")
@login_required
@require_permission("admin.services")
def list_services():
    company_id = (request.args.get("companyId") or "").strip() or None
    return jsonify(services_for_company(db.session, company_id))


@api_services_bp.post("")
@login_required
@require_permission("admin.services")
def toggle_service():
    body = json_body()
    cs = set_company_service(
        db.session,
        company_id=body.get("companyId"),
        service_id=body.get("serviceId"),
        is_enabled=body.get("isEnabled"),
    )
    db.session.commit()

    current_app.logger.info(
        "Service %s %s for company %s",
        cs.service_id, "enabled" if cs.is_enabled else "disabled", cs.company_id,
    )
    return jsonify(cs.to_dict())
