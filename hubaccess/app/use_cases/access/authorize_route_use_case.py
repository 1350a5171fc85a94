"""
Authorize Route Use Case

Answers "may the current session enter this path, and if not, where
should it go". Feeds the Guard with already-resolved inputs.
"""

import logging

from hubaccess.app.services.access_session import AccessSession
from hubaccess.domain.access import AuthorizationInput, Decision
from hubaccess.domain.guard import RouteGuard
from hubaccess.domain.route_table import RouteTable
from hubaccess.result import Result, Return

logger = logging.getLogger(__name__)


class AuthorizeRouteUseCase:
    """
    Use case for authorizing navigation to a path.

    Business Rules:
    - Paths without a declared requirement are public and always granted
    - Tenant routes trigger tenant resolution first; an unknown tenant is
      the terminal TENANT_NOT_FOUND error (render "not found")
    - Fetch failures resolve to "no membership", never to an exception
    - The Guard decides everything else
    """

    def __init__(self, session: AccessSession, route_table: RouteTable, guard: RouteGuard):
        self.session = session
        self.route_table = route_table
        self.guard = guard

    async def execute(self, path: str) -> Result[Decision]:
        """
        Execute authorize route use case.

        Args:
            path: Requested application path, e.g. "/c/acme/events"

        Returns:
            Result with Decision, or TENANT_NOT_FOUND Error
        """
        match = self.route_table.match(path)
        if match is None:
            return Return.ok(Decision.grant().model_copy(update={"rule": "public_route"}))

        slug = match.tenant_slug
        tenant_loading = False
        if slug and not self.session.identity_loading:
            await self.session.resolve_tenant(slug)
            if self.session.resolution.not_found:
                return Return.err(self.session.resolution.error)
            tenant_loading = self.session.resolution.loading
        elif slug:
            tenant_loading = True

        request = AuthorizationInput(
            identity_loading=self.session.identity_loading,
            tenant_loading=tenant_loading,
            platform_role=self.session.effective_platform_role(),
            membership=self.session.resolution.membership if slug else None,
            required_roles=match.requirement.required_roles,
            allow_pending=match.requirement.allow_pending,
            tenant_slug=slug,
            current_path=path,
        )
        decision = self.guard.authorize(request)

        identity = self.session.identity
        logger.debug(
            f"Authorize {path!r} for {identity.user_id if identity else 'anonymous'}: "
            f"{decision.kind.value} {decision.to or ''} ({decision.rule})"
        )
        return Return.ok(decision)
