from models import db
from models.membership import AssignmentStatus
from models.relationship import RelationshipType
from services.access import (
    DEFAULT_GLYPH,
    CurrentContext,
    RouteIcon,
    build_context,
    find_active_assignment,
    has_all_permissions,
    has_any_permission,
    has_permission,
    icon_glyph,
    permission_gate,
    sidebar_items,
)
from services.permissions import (
    PERMISSIONS,
    accessible_navigation,
    accessible_pages,
    accessible_section,
    expand_permissions,
    flatten_navigation,
    visible_sidebar_items,
)
from tests.conftest import assign, make_designation, make_relationship, make_user


def _ctx(*permissions) -> CurrentContext:
    return CurrentContext(
        user_id="u1",
        assignment_id="a1",
        company_id="c1",
        company_name="Coca-Cola",
        company_type="SUPPLIER",
        company_relationship_id=None,
        relationship_name=None,
        designation_id="d1",
        designation_name="Sales Rep",
        permissions=frozenset(permissions),
    )


class TestPredicates:
    def test_has_permission(self):
        assert has_permission(["deals.view"], "deals.view")
        assert not has_permission([], "deals.view")

    def test_any_and_all(self):
        perms = {"deals.view", "deals.edit"}
        assert has_any_permission(perms, ["deals.approve", "deals.edit"])
        assert not has_any_permission(perms, [])
        assert has_all_permissions(perms, ["deals.view", "deals.edit"])
        assert not has_all_permissions(perms, ["deals.view", "deals.approve"])
        assert has_all_permissions(perms, [])


class TestPermissionGate:
    def test_single_permission(self):
        ctx = _ctx("deals.view", "deals.edit")
        assert permission_gate(ctx, permission="deals.edit")
        assert not permission_gate(ctx, permission="deals.approve")

    def test_any_of(self):
        ctx = _ctx("deals.view")
        assert permission_gate(ctx, permissions=["deals.approve", "deals.view"])
        assert not permission_gate(ctx, permissions=["deals.approve", "deals.reject"])

    def test_all_of(self):
        ctx = _ctx("deals.view", "deals.edit")
        assert permission_gate(ctx, permissions=["deals.view", "deals.edit"], require_all=True)
        assert not permission_gate(ctx, permissions=["deals.view", "deals.approve"], require_all=True)

    def test_nothing_required_is_allowed(self):
        assert permission_gate(_ctx())
        assert permission_gate(None)

    def test_no_context_denies(self):
        assert not permission_gate(None, permission="deals.view")
        assert not permission_gate(None, permissions=["deals.view"])


class TestNavigation:
    def test_expand_permissions_adds_dependencies(self):
        assert expand_permissions(["deals.approve"]) == ["deals.approve", "deals.review", "deals.view"]
        assert expand_permissions(["deals.submit"]) == ["deals.create", "deals.submit", "deals.view"]

    def test_only_dashboard_without_permissions(self):
        nav = accessible_navigation([])
        assert [item.path for item in nav] == ["/dashboard"]

    def test_parent_without_permission_needs_accessible_child(self):
        nav = accessible_navigation(["users.view"])
        settings = next(item for item in nav if item.path == "/settings")
        assert [c.path for c in settings.children] == ["/settings/users"]

    def test_admin_section_filters_children(self):
        nav = accessible_navigation(["admin.companies", "admin.relationships"])
        admin = next(item for item in nav if item.path == "/admin")
        assert [c.path for c in admin.children] == ["/admin/companies", "/admin/relationships"]

    def test_full_permissions_show_everything(self):
        nav = accessible_navigation(list(PERMISSIONS))
        assert [item.path for item in nav] == ["/dashboard", "/deals", "/reports", "/settings", "/admin"]

    def test_flatten_assigns_ids_and_parents(self):
        routes = flatten_navigation(accessible_navigation(["users.view", "deals.view"]))
        by_id = {r.route_id: r for r in routes}

        assert by_id["dashboard"].parent_route_id is None
        assert by_id["settings-users"].parent_route_id == "settings"
        assert by_id["settings-users"].to_dict()["routePath"] == "/settings/users"

    def test_accessible_pages_and_sidebar_ids(self):
        pages = accessible_pages(["deals.view"])
        assert "/deals" in pages
        assert "/dashboard" in pages
        assert "/reports" not in pages
        assert visible_sidebar_items(["deals.view"]) == ["dashboard", "deals"]

    def test_section_keeps_only_accessible_children(self):
        section = accessible_section(["admin.companies", "admin.services"], "/admin")
        assert [c.path for c in section.children] == ["/admin/companies", "/admin/services"]
        assert accessible_section(["deals.view"], "/admin") is None
        assert accessible_section(["deals.view"], "/settings") is None


class TestSidebar:
    def test_icon_glyphs(self):
        assert icon_glyph("link") == RouteIcon.LINK.glyph
        assert icon_glyph(None) == RouteIcon.HOME.glyph
        assert icon_glyph("shield-check") == DEFAULT_GLYPH
        assert icon_glyph("no-such-icon") == DEFAULT_GLYPH

    def test_only_top_level_items(self):
        routes = _ctx("deals.view", "users.view").accessible_routes
        items = sidebar_items(routes, "/deals")

        assert [i.path for i in items] == ["/dashboard", "/deals", "/settings"]
        assert [i.active for i in items] == [False, True, False]
        assert items[1].glyph == RouteIcon.FILE_TEXT.glyph


class TestContextLoading:
    def test_relationship_scoped_context(self, app, companies):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)
            designation_id = make_designation("s1", "Sales Rep", ["deals.view", "deals.create"])
            user_id = make_user("rep@test.com")
            assignment_id = assign(user_id, "s1", designation_id, relationship_id=rel_id)

            ctx = build_context(find_active_assignment(db.session, user_id, assignment_id))

            assert ctx.company_name == "Coca-Cola"
            assert ctx.relationship_name == "FreshThyme ↔ Coca-Cola"
            assert ctx.designation_name == "Sales Rep"
            assert ctx.permissions == frozenset({"deals.view", "deals.create"})
            assert ctx.to_dict()["permissions"] == ["deals.create", "deals.view"]

    def test_inactive_assignment_is_not_found(self, app, companies):
        with app.app_context():
            designation_id = make_designation("m1", "Buyer", ["deals.view"])
            user_id = make_user("buyer@test.com")
            assignment_id = assign(user_id, "m1", designation_id, status=AssignmentStatus.INACTIVE)

            assert find_active_assignment(db.session, user_id, assignment_id) is None

    def test_context_includes_permission_dependencies(self, app, companies):
        with app.app_context():
            designation_id = make_designation("m1", "Approver", ["deals.approve", "reports.export"])
            user_id = make_user("approver@test.com")
            assignment_id = assign(user_id, "m1", designation_id)

            ctx = build_context(find_active_assignment(db.session, user_id, assignment_id))

            assert ctx.permissions == frozenset(
                {"deals.approve", "deals.review", "deals.view", "reports.export", "reports.view"}
            )
            assert permission_gate(ctx, permission="reports.view")
