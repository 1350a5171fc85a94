"""
Route Authorization Guard

Pure decision function mapping an AuthorizationInput to exactly one
Decision (GRANT, DEFER or REDIRECT). The evaluation order is the
ordered rule list below: the first rule returning a decision wins, and
the last rule always decides, so the guard is total.

Rule order:
1. defer_while_loading   - identity or tenant still loading
2. platform_override     - super-admins bypass tenant checks
3. anonymous_visitor     - no membership: join page or login
4. pending_holding_page  - pending member on a route they would qualify for
5. grant_required_role   - role in required set with an admissible status
6. redirect_home_area    - bounce to the best home area instead of a 403
"""

from typing import Callable, Iterable, List, Optional, Tuple

from hubaccess.domain.access import AuthorizationInput, Decision
from hubaccess.domain.entities.enums import MembershipStatus, PlatformRole
from hubaccess.domain.normalizer import is_admin_capable
from hubaccess.domain.paths import (
    COMMUNITIES_PATH,
    LOGIN_PATH,
    admin_home_path,
    is_within,
    join_path,
    member_home_path,
    pending_path,
    split_path,
)

MEMBER_APP_AREA = "app"

# Leaf paths of the member area reachable as /c/{slug}/{section}
MEMBER_SECTIONS = (
    "feed",
    "announcements",
    "events",
    "groups",
    "resources",
    "programs",
    "notifications",
    "profile",
)

GuardRule = Callable[[AuthorizationInput], Optional[Decision]]


class RouteGuard:
    """Ordered decision table over AuthorizationInput"""

    def __init__(self, member_sections: Iterable[str] = MEMBER_SECTIONS):
        self.member_sections = frozenset(member_sections)
        self.rules: List[Tuple[str, GuardRule]] = [
            ("defer_while_loading", self.defer_while_loading),
            ("platform_override", self.platform_override),
            ("anonymous_visitor", self.anonymous_visitor),
            ("pending_holding_page", self.pending_holding_page),
            ("grant_required_role", self.grant_required_role),
            ("redirect_home_area", self.redirect_home_area),
        ]

    def authorize(self, request: AuthorizationInput) -> Decision:
        for name, rule in self.rules:
            decision = rule(request)
            if decision is not None:
                return decision.model_copy(update={"rule": name})
        # redirect_home_area always decides; kept so the table stays total if reordered
        return Decision.redirect(LOGIN_PATH).model_copy(update={"rule": "fallback"})

    def is_member_path(self, path: str) -> bool:
        """
        True for the member app (/c/{slug}/app/...) and the member section
        leaves (/c/{slug}/events, ...). Admin paths never match.
        """
        segments = split_path(path)
        if len(segments) < 3 or segments[0] != "c":
            return False
        area = segments[2]
        return area == MEMBER_APP_AREA or area in self.member_sections

    @staticmethod
    def role_in_required(request: AuthorizationInput) -> bool:
        return (
            request.membership is not None
            and request.membership.role in request.required_roles
        )

    def defer_while_loading(self, request: AuthorizationInput) -> Optional[Decision]:
        if request.identity_loading or request.tenant_loading:
            return Decision.defer()
        return None

    def platform_override(self, request: AuthorizationInput) -> Optional[Decision]:
        if request.platform_role == PlatformRole.SUPER_ADMIN:
            return Decision.grant()
        return None

    def anonymous_visitor(self, request: AuthorizationInput) -> Optional[Decision]:
        if request.membership is not None:
            return None
        if request.tenant_slug and self.is_member_path(request.current_path):
            return Decision.redirect(join_path(request.tenant_slug))
        return Decision.redirect(LOGIN_PATH)

    def pending_holding_page(self, request: AuthorizationInput) -> Optional[Decision]:
        if (
            request.membership.status == MembershipStatus.PENDING
            and not request.allow_pending
            and self.role_in_required(request)
            and request.tenant_slug
        ):
            return Decision.redirect(pending_path(request.tenant_slug))
        return None

    def grant_required_role(self, request: AuthorizationInput) -> Optional[Decision]:
        status = request.membership.status
        status_admitted = status == MembershipStatus.ACTIVE or (
            status == MembershipStatus.PENDING and request.allow_pending
        )
        if status_admitted and self.role_in_required(request):
            return Decision.grant()
        return None

    def redirect_home_area(self, request: AuthorizationInput) -> Optional[Decision]:
        slug = request.tenant_slug
        if not slug:
            return Decision.redirect(LOGIN_PATH)

        membership = request.membership
        if membership.status == MembershipStatus.PENDING:
            target = pending_path(slug)
        elif is_admin_capable(membership.role):
            target = admin_home_path(slug)
        else:
            target = member_home_path(slug)

        # Home area would bounce straight back here (e.g. suspended member on /app)
        if is_within(request.current_path, target):
            return Decision.redirect(COMMUNITIES_PATH)
        return Decision.redirect(target)


default_guard = RouteGuard()


def authorize(request: AuthorizationInput) -> Decision:
    return default_guard.authorize(request)
