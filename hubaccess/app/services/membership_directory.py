"""
Membership Directory

The authenticated user's memberships across all tenants, refreshed
whenever the identity changes.
"""

import asyncio
import logging
from typing import List, Optional
from uuid import UUID

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities.enums import MembershipStatus
from hubaccess.domain.normalizer import rank

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class MembershipDirectory:
    def __init__(
        self,
        uow: UnitOfWork,
        cache: Optional[AccessCache] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.uow = uow
        self.cache = cache
        self.timeout_seconds = timeout_seconds
        self.memberships: List[ResolvedMembership] = []
        self.loading = False
        self._generation = 0

    async def list_memberships(self, user_id: UUID) -> List[ResolvedMembership]:
        """
        All memberships of a user, normalized.

        A user without memberships gets an empty list. Timeouts and fetch
        failures are logged and also yield an empty list, so callers fall
        back to least-privilege routing.
        """
        if self.cache is not None:
            cached = self.cache.get_memberships(user_id)
            if cached is not None:
                return cached

        try:
            memberships = await asyncio.wait_for(
                self._fetch(user_id), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Membership lookup for user {user_id} timed out after {self.timeout_seconds}s"
            )
            return []
        except Exception:
            logger.exception(f"Membership lookup for user {user_id} failed")
            return []

        if self.cache is not None:
            self.cache.put_memberships(user_id, memberships)
        return memberships

    async def _fetch(self, user_id: UUID) -> List[ResolvedMembership]:
        async with self.uow:
            records = await self.uow.memberships.get_by_user_id(user_id)
            return [ResolvedMembership.from_record(record) for record in records]

    async def refresh(self, identity: Optional[Identity]) -> None:
        """Identity change listener"""
        self._generation += 1
        generation = self._generation

        if identity is None:
            self.memberships = []
            self.loading = False
            return

        self.loading = True
        memberships = await self.list_memberships(identity.user_id)
        if generation != self._generation:
            logger.debug(f"Discarding stale membership list for user {identity.user_id}")
            return
        self.memberships = memberships
        self.loading = False

    @staticmethod
    def highest_privilege_membership(
        memberships: List[ResolvedMembership],
    ) -> Optional[ResolvedMembership]:
        """
        Highest-ranked ACTIVE membership; ties broken by tenant id.
        None when no membership is active.
        """
        active = [m for m in memberships if m.status == MembershipStatus.ACTIVE]
        if not active:
            return None
        return min(active, key=lambda m: (-rank(m.role), str(m.tenant_id)))

    @staticmethod
    def eligible_memberships(
        memberships: List[ResolvedMembership],
    ) -> List[ResolvedMembership]:
        """Memberships worth listing under "my communities" (ACTIVE or PENDING)"""
        return [
            m
            for m in memberships
            if m.status in (MembershipStatus.ACTIVE, MembershipStatus.PENDING)
        ]
