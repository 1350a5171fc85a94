"""
Resolution Session

Re-runs the Tenant Resolver whenever (slug, user id, platform role,
impersonation) changes and applies only the result of the most recently
started resolution. Each attempt captures a generation number at start
and commits only if that generation is still current; stale completions
are dropped silently.
"""

import asyncio
import logging
from typing import Optional, Tuple
from uuid import UUID

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.domain.access import (
    Identity,
    ImpersonationState,
    ResolvedMembership,
    TenantContext,
)
from hubaccess.domain.entities.enums import PlatformRole
from hubaccess.result import Error, Result, Return

logger = logging.getLogger(__name__)

ResolutionKey = Tuple[str, Optional[UUID], Optional[PlatformRole], Optional[ImpersonationState]]

TENANT_NOT_FOUND = "TENANT_NOT_FOUND"


class ResolutionSession:
    def __init__(self, resolver, cache: Optional[AccessCache] = None):
        """
        Args:
            resolver: Object with async execute(slug, identity, impersonation)
                returning Result[TenantContext] (ResolveTenantUseCase)
            cache: Optional shared cache keyed by (slug, user id)
        """
        self.resolver = resolver
        self.cache = cache
        self.loading = False
        self.context: Optional[TenantContext] = None
        self.error: Optional[Error] = None
        self.key: Optional[ResolutionKey] = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def membership(self) -> Optional[ResolvedMembership]:
        return self.context.membership if self.context is not None else None

    @property
    def not_found(self) -> bool:
        return self.error is not None and self.error.code == TENANT_NOT_FOUND

    @staticmethod
    def key_for(
        slug: str,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState],
    ) -> ResolutionKey:
        if identity is None:
            return (slug, None, None, None)
        return (slug, identity.user_id, identity.platform_role, impersonation)

    async def ensure(
        self,
        slug: str,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState] = None,
    ) -> bool:
        """Resolve only if the inputs differ from the last committed ones."""
        if not self.loading and self.key == self.key_for(slug, identity, impersonation):
            return True
        return await self.resolve(slug, identity, impersonation)

    async def resolve(
        self,
        slug: str,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState] = None,
    ) -> bool:
        """
        Start a resolution. Returns True if its result was committed,
        False if a newer resolution superseded it.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        user_id = identity.user_id if identity is not None else None

        cacheable = self.cache is not None and impersonation is None
        result: Optional[Result[TenantContext]] = None
        if cacheable:
            cached = self.cache.get_context(slug, user_id)
            if cached is not None:
                result = Return.ok(cached)

        fetched = result is None
        if fetched:
            result = await self.resolver.execute(slug, identity, impersonation)

        async with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale resolution #{generation} for {slug!r}")
                return False
            # Only the current generation may populate the shared cache
            if fetched and cacheable and result.is_ok():
                self.cache.put_context(slug, user_id, result.value)
            self._commit(self.key_for(slug, identity, impersonation), result)
            return True

    def invalidate(self) -> None:
        """Supersede anything in flight and forget the committed context."""
        self._generation += 1
        self.loading = False
        self.context = None
        self.error = None
        self.key = None

    def _commit(self, key: ResolutionKey, result: Result[TenantContext]) -> None:
        self.key = key
        self.loading = False
        if result.is_ok():
            self.context = result.value
            self.error = None
            return

        # Fetch failures degrade to "no membership"; not-found is terminal
        self.context = None
        self.error = result.error
        if result.error.code != TENANT_NOT_FOUND:
            logger.warning(
                f"Tenant {key[0]!r} could not be resolved ({result.error.code}), "
                "continuing without membership"
            )
