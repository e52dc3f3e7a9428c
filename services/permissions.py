"""
Catálogo de permisos y navegación.

Fuente única para:
1. Definición de permisos (key -> descripción, categoría)
2. Dependencias entre permisos (ej. deals.create requiere deals.view)
3. Permiso requerido por página
4. Árbol de navegación del sidebar

La base de datos guarda qué permisos tiene cada cargo; este módulo decide qué
se muestra con esos permisos.
"""

from dataclasses import dataclass


PERMISSIONS = {
    # DEALS
    "deals.view": {"description": "View deals", "category": "DEALS"},
    "deals.create": {"description": "Create new deals (Supplier)", "category": "DEALS"},
    "deals.edit": {"description": "Edit existing deals", "category": "DEALS"},
    "deals.delete": {"description": "Delete deals", "category": "DEALS"},
    "deals.submit": {"description": "Submit deals for review (Supplier)", "category": "DEALS"},
    "deals.review": {"description": "Review submitted deals (Merchant)", "category": "DEALS"},
    "deals.approve": {"description": "Approve deals (Merchant)", "category": "DEALS"},
    "deals.reject": {"description": "Reject deals (Merchant)", "category": "DEALS"},
    # REPORTS
    "reports.view": {"description": "View reports", "category": "REPORTS"},
    "reports.export": {"description": "Export reports to CSV/PDF", "category": "REPORTS"},
    # USERS
    "users.view": {"description": "View users in company", "category": "USERS"},
    "users.invite": {"description": "Invite new users", "category": "USERS"},
    "users.manage": {"description": "Edit/deactivate users", "category": "USERS"},
    # SETTINGS
    "roles.view": {"description": "View roles", "category": "SETTINGS"},
    "roles.manage": {"description": "Create/edit roles", "category": "SETTINGS"},
    "company.settings": {"description": "Manage company settings", "category": "SETTINGS"},
    # ADMIN (solo Radian)
    "admin.companies": {"description": "Manage all companies", "category": "ADMIN"},
    "admin.services": {"description": "Grant services to companies", "category": "ADMIN"},
    "admin.relationships": {"description": "Manage company relationships", "category": "ADMIN"},
}

PERMISSION_DEPENDENCIES = {
    "deals.create": ["deals.view"],
    "deals.edit": ["deals.view"],
    "deals.delete": ["deals.view"],
    "deals.submit": ["deals.view", "deals.create"],
    "deals.review": ["deals.view"],
    "deals.approve": ["deals.view", "deals.review"],
    "deals.reject": ["deals.view", "deals.review"],
    "reports.export": ["reports.view"],
    "users.invite": ["users.view"],
    "users.manage": ["users.view"],
    "roles.manage": ["roles.view"],
    "admin.services": ["admin.companies"],
    "admin.relationships": ["admin.companies"],
}

# None => página visible para cualquier usuario con contexto
PAGE_PERMISSIONS = {
    "/dashboard": None,
    "/deals": "deals.view",
    "/reports": "reports.view",
    "/settings": None,
    "/settings/users": "users.view",
    "/settings/roles": "roles.view",
    "/settings/company": "company.settings",
    "/admin/companies": "admin.companies",
    "/admin/services": "admin.services",
    "/admin/relationships": "admin.relationships",
}


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    icon: str
    permission: str | None = None
    children: tuple["NavItem", ...] = ()

    def to_dict(self) -> dict:
        d = {
            "path": self.path,
            "label": self.label,
            "icon": self.icon,
            "permission": self.permission,
        }
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d


NAVIGATION = (
    NavItem("/dashboard", "Dashboard", "home"),
    NavItem("/deals", "Deals", "file-text", "deals.view"),
    NavItem("/reports", "Reports", "bar-chart", "reports.view"),
    NavItem(
        "/settings", "Settings", "settings", None,
        children=(
            NavItem("/settings/users", "User Management", "users", "users.view"),
            NavItem("/settings/roles", "Role Management", "shield", "roles.view"),
            NavItem("/settings/company", "Company Settings", "building-2", "company.settings"),
        ),
    ),
    NavItem(
        "/admin", "Admin", "shield-check", "admin.companies",
        children=(
            NavItem("/admin/companies", "Companies", "building", "admin.companies"),
            NavItem("/admin/services", "Services", "plus", "admin.services"),
            NavItem("/admin/relationships", "Relationships", "link", "admin.relationships"),
        ),
    ),
)


@dataclass(frozen=True)
class RouteItem:
    route_id: str
    route_path: str
    route_label: str
    route_icon: str | None
    show_on_side_menu: bool = True
    parent_route_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "routeId": self.route_id,
            "routePath": self.route_path,
            "routeLabel": self.route_label,
            "routeIcon": self.route_icon,
            "showOnSideMenu": self.show_on_side_menu,
            "parentRouteId": self.parent_route_id,
        }


def required_permissions(permission: str) -> set[str]:
    """Dependencias transitivas de un permiso (sin incluirlo)."""
    required = set()
    stack = [permission]
    while stack:
        current = stack.pop()
        for dep in PERMISSION_DEPENDENCIES.get(current, ()):
            if dep not in required:
                required.add(dep)
                stack.append(dep)
    return required


def expand_permissions(permissions) -> list[str]:
    expanded = set(permissions)
    for p in permissions:
        expanded |= required_permissions(p)
    return sorted(expanded)


def accessible_navigation(permissions, items=NAVIGATION) -> list[NavItem]:
    """
    Filtra el árbol según permisos.
    - Con permiso requerido: se muestra si el usuario lo tiene.
    - Sin permiso y con hijos: solo si queda algún hijo accesible.
    """
    perms = set(permissions)
    result = []
    for item in items:
        children = tuple(accessible_navigation(perms, item.children)) if item.children else ()
        if item.permission is None:
            if item.children and not children:
                continue
        elif item.permission not in perms:
            continue
        result.append(NavItem(item.path, item.label, item.icon, item.permission, children))
    return result


def _route_id(path: str) -> str:
    return path.replace("/", "-")[1:] or "home"


def flatten_navigation(items, parent_id: str | None = None) -> list[RouteItem]:
    result = []
    for item in items:
        route_id = _route_id(item.path)
        result.append(
            RouteItem(
                route_id=route_id,
                route_path=item.path,
                route_label=item.label,
                route_icon=item.icon,
                show_on_side_menu=True,
                parent_route_id=parent_id,
            )
        )
        if item.children:
            result.extend(flatten_navigation(item.children, route_id))
    return result


def accessible_pages(permissions) -> list[str]:
    perms = set(permissions)
    return [page for page, required in PAGE_PERMISSIONS.items() if required is None or required in perms]


def visible_sidebar_items(permissions) -> list[str]:
    return [r.route_id for r in flatten_navigation(accessible_navigation(permissions))]


def accessible_section(permissions, path: str) -> NavItem | None:
    """Entrada de primer nivel (con sus hijos ya filtrados) para una página índice."""
    for item in accessible_navigation(permissions):
        if item.path == path:
            return item
    return None
