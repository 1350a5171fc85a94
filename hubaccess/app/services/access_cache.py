"""
Access Cache

Caches membership lists keyed by user id and tenant contexts keyed by
(slug, user id). Entries are never shared across users. Invalidated on
sign-out, membership mutation and impersonation start/stop.
"""

import time
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from hubaccess.domain.access import ResolvedMembership, TenantContext

ContextKey = Tuple[str, Optional[UUID]]


class AccessCache:
    def __init__(self, ttl_seconds: float = 30.0):
        self.ttl_seconds = ttl_seconds
        self._memberships: Dict[UUID, Tuple[float, List[ResolvedMembership]]] = {}
        self._contexts: Dict[ContextKey, Tuple[float, TenantContext]] = {}

    def _fresh(self, stored_at: float) -> bool:
        return time.monotonic() - stored_at < self.ttl_seconds

    def get_memberships(self, user_id: UUID) -> Optional[List[ResolvedMembership]]:
        entry = self._memberships.get(user_id)
        if entry is None or not self._fresh(entry[0]):
            self._memberships.pop(user_id, None)
            return None
        return list(entry[1])

    def put_memberships(self, user_id: UUID, memberships: List[ResolvedMembership]) -> None:
        self._memberships[user_id] = (time.monotonic(), list(memberships))

    def get_context(self, slug: str, user_id: Optional[UUID]) -> Optional[TenantContext]:
        key = (slug, user_id)
        entry = self._contexts.get(key)
        if entry is None or not self._fresh(entry[0]):
            self._contexts.pop(key, None)
            return None
        return entry[1]

    def put_context(self, slug: str, user_id: Optional[UUID], context: TenantContext) -> None:
        self._contexts[(slug, user_id)] = (time.monotonic(), context)

    def invalidate_user(self, user_id: UUID) -> None:
        self._memberships.pop(user_id, None)
        for key in [key for key in self._contexts if key[1] == user_id]:
            del self._contexts[key]

    def invalidate_tenant(self, tenant_id: UUID) -> None:
        """Drop every cached context of one tenant (all viewers)"""
        stale = [
            key
            for key, (_, context) in self._contexts.items()
            if context.tenant.id == tenant_id
        ]
        for key in stale:
            del self._contexts[key]
