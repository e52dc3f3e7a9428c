from flask import Blueprint, current_app, jsonify
from flask_login import login_required

from models import db
from routes.guards import json_body, require_permission
from services.relationships import (
    create_relationship,
    deactivate_relationship,
    get_relationship_detail,
    list_relationships,
    relationship_detail,
    relationship_list_item,
    relationship_with_companies,
    update_relationship,
)

api_relationships_bp = Blueprint("api_relationships", __name__, url_prefix="/api/relationships")


@api_relationships_bp.get("")
@login_required
@require_permission("admin.relationships")
def list_all():
    rows = list_relationships(db.session)
    return jsonify([relationship_list_item(rel, count) for rel, count in rows])


@api_relationships_bp.post("")
@login_required
@require_permission("admin.relationships")
def create():
    body = json_body()
    rel = create_relationship(
        db.session,
        from_company_id=body.get("fromCompanyId"),
        to_company_id=body.get("toCompanyId"),
        relationship_type=body.get("relationshipType"),
    )
    db.session.commit()

    current_app.logger.info(
        "Relationship created: %s %s -> %s",
        rel.relationship_type, rel.from_company_id, rel.to_company_id,
    )
    return jsonify(relationship_with_companies(rel)), 201


@api_relationships_bp.get("/<relationship_id>")
@login_required
@require_permission("admin.relationships")
def get_one(relationship_id: str):
    rel = get_relationship_detail(db.session, relationship_id)
    return jsonify(relationship_detail(rel))


@api_relationships_bp.put("/<relationship_id>")
@login_required
@require_permission("admin.relationships")
def update(relationship_id: str):
    body = json_body()
    rel = update_relationship(
        db.session,
        relationship_id,
        relationship_status=body.get("relationshipStatus"),
    )
    db.session.commit()

    current_app.logger.info("Relationship %s status=%s", rel.company_relationship_id, rel.relationship_status)
    return jsonify(relationship_with_companies(rel))


@api_relationships_bp.delete("/<relationship_id>")
@login_required
@require_permission("admin.relationships")
def soft_delete(relationship_id: str):
    rel, deactivated = deactivate_relationship(db.session, relationship_id)
    # Un solo commit: asignaciones y relación quedan INACTIVE juntas o ninguna
    db.session.commit()

    current_app.logger.info(
        "Relationship %s deactivated (%d assignments)", rel.company_relationship_id, deactivated
    )
    return jsonify({
        "message": "Relationship deactivated successfully",
        "relationship": rel.to_dict(),
        "deactivatedAssignments": deactivated,
    })
