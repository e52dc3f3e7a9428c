from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy.orm import Session, joinedload

from models.designation import DesignationMaster, DesignationPermission
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship
from services.permissions import RouteItem, accessible_navigation, expand_permissions, flatten_navigation


@dataclass(frozen=True)
class CurrentContext:
    """Empresa/cargo activo del usuario para la petición en curso."""

    user_id: str
    assignment_id: str
    company_id: str
    company_name: str
    company_type: str
    company_relationship_id: str | None
    relationship_name: str | None
    designation_id: str
    designation_name: str
    permissions: frozenset = field(default_factory=frozenset)

    @property
    def accessible_routes(self) -> list[RouteItem]:
        return flatten_navigation(accessible_navigation(self.permissions))

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "companyId": self.company_id,
            "companyName": self.company_name,
            "companyType": self.company_type,
            "companyRelationshipId": self.company_relationship_id,
            "relationshipName": self.relationship_name,
            "designationId": self.designation_id,
            "designationName": self.designation_name,
            "permissions": sorted(self.permissions),
        }


def _assignment_options():
    return (
        joinedload(UserCompanyAssignment.company),
        joinedload(UserCompanyAssignment.designation)
        .selectinload(DesignationMaster.permissions)
        .joinedload(DesignationPermission.permission),
        joinedload(UserCompanyAssignment.company_relationship).joinedload(CompanyRelationship.from_company),
        joinedload(UserCompanyAssignment.company_relationship).joinedload(CompanyRelationship.to_company),
    )


def active_assignments(db: Session, user_id: str) -> list[UserCompanyAssignment]:
    return (
        db.query(UserCompanyAssignment)
        .options(*_assignment_options())
        .filter(
            UserCompanyAssignment.user_id == user_id,
            UserCompanyAssignment.assignment_status == AssignmentStatus.ACTIVE,
        )
        .order_by(UserCompanyAssignment.created_at.asc())
        .all()
    )


def find_active_assignment(db: Session, user_id: str, assignment_id: str) -> UserCompanyAssignment | None:
    return (
        db.query(UserCompanyAssignment)
        .options(*_assignment_options())
        .filter(
            UserCompanyAssignment.user_company_assignment_id == assignment_id,
            UserCompanyAssignment.user_id == user_id,
            UserCompanyAssignment.assignment_status == AssignmentStatus.ACTIVE,
        )
        .first()
    )


def build_context(assignment: UserCompanyAssignment) -> CurrentContext:
    rel = assignment.company_relationship
    return CurrentContext(
        user_id=assignment.user_id,
        assignment_id=assignment.user_company_assignment_id,
        company_id=assignment.company_id,
        company_name=assignment.company.company_name,
        company_type=assignment.company.company_type,
        company_relationship_id=assignment.company_relationship_id,
        relationship_name=rel.display_name if rel else None,
        designation_id=assignment.designation_id,
        designation_name=assignment.designation.designation_name,
        # Un permiso trae sus dependencias (ej. deals.approve => deals.review, deals.view)
        permissions=frozenset(expand_permissions(assignment.designation.permission_keys)),
    )


# -------------------------
# Predicados de permisos
# -------------------------
def has_permission(user_permissions, required: str) -> bool:
    return required in user_permissions


def has_any_permission(user_permissions, required) -> bool:
    return any(p in user_permissions for p in required)


def has_all_permissions(user_permissions, required) -> bool:
    return all(p in user_permissions for p in required)


def permission_gate(
    context: CurrentContext | None,
    permission: str | None = None,
    permissions=None,
    require_all: bool = False,
) -> bool:
    """True si el contexto cumple el permiso pedido (o si no se pide ninguno)."""
    user_permissions = context.permissions if context else frozenset()
    if permission:
        return has_permission(user_permissions, permission)
    if permissions:
        if require_all:
            return has_all_permissions(user_permissions, permissions)
        return has_any_permission(user_permissions, permissions)
    return True


# -------------------------
# Sidebar
# -------------------------
class RouteIcon(Enum):
    HOME = "home"
    FILE_TEXT = "file-text"
    BAR_CHART = "bar-chart"
    SETTINGS = "settings"
    USERS = "users"
    SHIELD = "shield"
    BUILDING = "building"
    KEY = "key"
    LINK = "link"
    DOWNLOAD = "download"
    PLUS = "plus"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @classmethod
    def from_key(cls, key: str | None) -> "RouteIcon | None":
        try:
            return cls(key or cls.HOME.value)
        except ValueError:
            return None


_GLYPHS = {
    RouteIcon.HOME: "⌂",
    RouteIcon.FILE_TEXT: "▤",
    RouteIcon.BAR_CHART: "▥",
    RouteIcon.SETTINGS: "⚙",
    RouteIcon.USERS: "☺",
    RouteIcon.SHIELD: "⛨",
    RouteIcon.BUILDING: "▦",
    RouteIcon.KEY: "⚿",
    RouteIcon.LINK: "⛓",
    RouteIcon.DOWNLOAD: "⤓",
    RouteIcon.PLUS: "+",
}

DEFAULT_GLYPH = "•"


def icon_glyph(key: str | None) -> str:
    icon = RouteIcon.from_key(key)
    return icon.glyph if icon else DEFAULT_GLYPH


@dataclass(frozen=True)
class SidebarItem:
    route_id: str
    path: str
    label: str
    glyph: str
    active: bool


def sidebar_items(routes, current_path: str) -> list[SidebarItem]:
    """Solo rutas de primer nivel marcadas para el menú lateral."""
    return [
        SidebarItem(
            route_id=r.route_id,
            path=r.route_path,
            label=r.route_label,
            glyph=icon_glyph(r.route_icon),
            active=r.route_path == current_path,
        )
        for r in routes
        if r.show_on_side_menu and not r.parent_route_id
    ]
