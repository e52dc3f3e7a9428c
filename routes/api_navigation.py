from flask import Blueprint, jsonify, request
from flask_login import login_required

from services.errors import ValidationError
from services.permissions import (
    NAVIGATION,
    PAGE_PERMISSIONS,
    accessible_navigation,
    accessible_pages,
    visible_sidebar_items,
)

api_navigation_bp = Blueprint("api_navigation", __name__, url_prefix="/api/routes")


@api_navigation_bp.get("")
@login_required
def navigation():
    return jsonify({
        "navigation": [item.to_dict() for item in NAVIGATION],
        "pagePermissions": PAGE_PERMISSIONS,
    })


@api_navigation_bp.post("")
@login_required
def navigation_for_permissions():
    """
    Filtra la navegación por una lista de permisos (para el sidebar):
    POST /api/routes {"permissions": [...]}
    """
    body = request.get_json(silent=True)
    permissions = body.get("permissions") if isinstance(body, dict) else None
    if not isinstance(permissions, list) or not all(isinstance(p, str) for p in permissions):
        raise ValidationError("Invalid permissions array")

    return jsonify({
        "navigation": [item.to_dict() for item in accessible_navigation(permissions)],
        "accessiblePages": accessible_pages(permissions),
        "visibleSidebarItems": visible_sidebar_items(permissions),
    })
