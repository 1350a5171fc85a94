"""
Route Table

Static declaration mapping path patterns to RouteRequirement. The
routing layer owns dispatch; this table only answers "which requirement
guards this path, and which tenant slug does it carry".

Pattern syntax:
- literal segments match exactly
- "{slug}" matches one segment and captures the tenant slug
- a trailing "*" matches any remainder, including nothing
"""

from typing import Iterable, List, NamedTuple, Optional, Tuple

from hubaccess.domain.access import RouteRequirement
from hubaccess.domain.guard import MEMBER_SECTIONS
from hubaccess.domain.paths import split_path

SLUG_PLACEHOLDER = "{slug}"
WILDCARD = "*"

ANY_MEMBER_ROLES = ("member", "employee", "supervisor", "admin", "owner")
ADMIN_AREA_ROLES = ("admin", "owner", "supervisor")


class RouteMatch(NamedTuple):
    pattern: str
    requirement: RouteRequirement
    tenant_slug: Optional[str]


def tenant_slug_from_path(path: str) -> Optional[str]:
    segments = split_path(path)
    if len(segments) >= 2 and segments[0] == "c":
        return segments[1]
    return None


def _match_pattern(pattern: str, path: str) -> Tuple[bool, Optional[str]]:
    pattern_segments = split_path(pattern)
    segments = split_path(path)
    slug = None

    for index, expected in enumerate(pattern_segments):
        if expected == WILDCARD:
            return True, slug
        if index >= len(segments):
            return False, None
        if expected == SLUG_PLACEHOLDER:
            slug = segments[index]
        elif expected != segments[index]:
            return False, None

    if len(segments) != len(pattern_segments):
        return False, None
    return True, slug


class RouteTable:
    """First matching pattern wins; unmatched paths are public"""

    def __init__(self, routes: Iterable[Tuple[str, RouteRequirement]]):
        self.routes: List[Tuple[str, RouteRequirement]] = list(routes)

    def match(self, path: str) -> Optional[RouteMatch]:
        for pattern, requirement in self.routes:
            matched, slug = _match_pattern(pattern, path)
            if matched:
                return RouteMatch(pattern, requirement, slug)
        return None


def build_default_route_table(member_sections: Iterable[str] = MEMBER_SECTIONS) -> RouteTable:
    """
    Route tree of the community hub.

    Public pages (/, /communities, /c/{slug}, /c/{slug}/join,
    /c/{slug}/pending, /login, ...) are not declared and need no guard.
    """
    member_requirement = RouteRequirement(required_roles=ANY_MEMBER_ROLES)
    admin_requirement = RouteRequirement(required_roles=ADMIN_AREA_ROLES)

    routes = [
        ("/c/{slug}/app/*", member_requirement),
        ("/c/{slug}/admin/*", admin_requirement),
        # No tenant role qualifies; only the platform override passes
        ("/super-admin/*", RouteRequirement(required_roles=())),
    ]
    routes.extend(
        (f"/c/{{slug}}/{section}/*", member_requirement) for section in member_sections
    )
    return RouteTable(routes)
