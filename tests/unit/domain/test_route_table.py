from hubaccess.domain.entities.enums import MembershipRole
from hubaccess.domain.route_table import (
    RouteTable,
    build_default_route_table,
    tenant_slug_from_path,
)
from hubaccess.domain.access import RouteRequirement


def test_member_sections_require_any_member_role():
    table = build_default_route_table()
    match = table.match("/c/acme/events")

    assert match is not None
    assert match.tenant_slug == "acme"
    assert match.requirement.required_roles == frozenset(MembershipRole)
    assert match.requirement.allow_pending is False


def test_admin_area_requires_admin_capable_roles():
    table = build_default_route_table()
    match = table.match("/c/acme/admin/members")

    assert match.pattern == "/c/{slug}/admin/*"
    assert match.requirement.required_roles == frozenset(
        {MembershipRole.ADMIN, MembershipRole.OWNER, MembershipRole.MODERATOR}
    )


def test_wildcard_matches_the_area_root():
    table = build_default_route_table()
    assert table.match("/c/acme/app").pattern == "/c/{slug}/app/*"
    assert table.match("/c/acme/app/").pattern == "/c/{slug}/app/*"
    assert table.match("/c/acme/app/groups/42").pattern == "/c/{slug}/app/*"


def test_public_pages_are_not_declared():
    table = build_default_route_table()
    for path in ["/", "/login", "/communities", "/c/acme", "/c/acme/join", "/c/acme/pending"]:
        assert table.match(path) is None


def test_super_admin_console_has_no_tenant():
    match = build_default_route_table().match("/super-admin/tenants")
    assert match.tenant_slug is None
    assert match.requirement.required_roles == frozenset()


def test_first_matching_route_wins():
    table = RouteTable(
        [
            ("/c/{slug}/app/settings", RouteRequirement(required_roles=["owner"])),
            ("/c/{slug}/app/*", RouteRequirement(required_roles=["member"])),
        ]
    )
    assert table.match("/c/acme/app/settings").requirement.required_roles == frozenset(
        {MembershipRole.OWNER}
    )
    assert table.match("/c/acme/app/feed").requirement.required_roles == frozenset(
        {MembershipRole.MEMBER}
    )


def test_query_string_is_ignored():
    assert build_default_route_table().match("/c/acme/events?page=2").tenant_slug == "acme"


def test_tenant_slug_from_path():
    assert tenant_slug_from_path("/c/acme/app") == "acme"
    assert tenant_slug_from_path("/c/acme") == "acme"
    assert tenant_slug_from_path("/communities") is None
