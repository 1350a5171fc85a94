"""
Impersonation Overlay

Lets a platform super-admin look at a tenant as a specific member would.
Only the Tenant Resolver consults the overlay; the Guard only ever sees
the resulting membership.
"""

import logging
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from hubaccess.app.repositories.impersonation_repository import IImpersonationRepository
from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.audit_sink import IAuditSink
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import AuditRecord, Identity, ImpersonationState
from hubaccess.result import Error, Result, Return

logger = logging.getLogger(__name__)

IMPERSONATION_STARTED = "impersonation_started"
IMPERSONATION_STOPPED = "impersonation_stopped"


class ImpersonationOverlay:
    """
    Business Rules:
    - Only SUPER_ADMIN actors may impersonate (IMPERSONATION_FORBIDDEN)
    - The target must hold a membership in the given tenant, or in any
      tenant when tenant_id is None (IMPERSONATION_TARGET_INVALID)
    - Start/stop emit audit records; a failing audit sink never blocks
    - Start/stop invalidate the actor's cached tenant contexts
    - Cleared when the actor signs out or the identity changes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        repository: IImpersonationRepository,
        audit_sink: IAuditSink,
        cache: Optional[AccessCache] = None,
    ):
        self.uow = uow
        self.repository = repository
        self.audit_sink = audit_sink
        self.cache = cache
        self.actor: Optional[Identity] = None
        self._state: Optional[ImpersonationState] = None

    def current_impersonation(self) -> Optional[ImpersonationState]:
        return self._state

    async def bind(self, actor: Optional[Identity]) -> None:
        """Attach the overlay to an actor and load any persisted state."""
        self.actor = actor
        self._state = None
        if actor is not None and actor.is_super_admin:
            self._state = await self.repository.get(actor.user_id)

    async def on_identity_change(self, identity: Optional[Identity]) -> None:
        """Identity change listener: sign-out or user switch clears the overlay."""
        previous = self.actor
        if previous is not None and (identity is None or identity.user_id != previous.user_id):
            await self._clear(previous)
        await self.bind(identity)

    async def start_impersonation(
        self, user_id: UUID, tenant_id: Optional[UUID] = None
    ) -> Result[ImpersonationState]:
        """
        Start acting as user_id within tenant_id (None = any tenant).

        Returns:
            Result with the new ImpersonationState, or Error
        """
        actor = self.actor
        if actor is None or not actor.is_super_admin:
            return Return.err(
                Error("IMPERSONATION_FORBIDDEN", "Only platform super-admins can impersonate")
            )

        async with self.uow:
            target = await self.uow.users.get_by_id(user_id)
            if target is None:
                return Return.err(
                    Error("IMPERSONATION_TARGET_INVALID", "Target user does not exist")
                )

            if tenant_id is not None:
                membership = await self.uow.memberships.get_by_user_and_tenant(
                    user_id, tenant_id
                )
                has_membership = membership is not None
            else:
                has_membership = bool(await self.uow.memberships.get_by_user_id(user_id))

        if not has_membership:
            return Return.err(
                Error(
                    "IMPERSONATION_TARGET_INVALID",
                    "Target user has no membership to impersonate",
                )
            )

        if self._state is not None:
            await self._emit(IMPERSONATION_STOPPED, actor, self._state)

        state = ImpersonationState(
            as_user_id=user_id, tenant_id=tenant_id, started_at=datetime.now(UTC)
        )
        await self.repository.save(actor.user_id, state)
        self._state = state
        self._invalidate(actor)
        logger.info(f"Super-admin {actor.user_id} started impersonating {user_id}")

        await self._emit(IMPERSONATION_STARTED, actor, state)
        return Return.ok(state)

    async def stop_impersonation(self) -> Optional[ImpersonationState]:
        """Stop impersonating; idempotent. Returns the overlay that was active."""
        if self.actor is None:
            return None
        return await self._clear(self.actor)

    async def _clear(self, actor: Identity) -> Optional[ImpersonationState]:
        state = self._state
        if state is None:
            return None

        await self.repository.delete(actor.user_id)
        self._state = None
        self._invalidate(actor)
        logger.info(f"Super-admin {actor.user_id} stopped impersonating {state.as_user_id}")

        await self._emit(IMPERSONATION_STOPPED, actor, state)
        return state

    def _invalidate(self, actor: Identity) -> None:
        if self.cache is not None:
            self.cache.invalidate_user(actor.user_id)

    async def _emit(self, action: str, actor: Identity, state: ImpersonationState) -> None:
        record = AuditRecord(
            action=action,
            tenant_id=state.tenant_id,
            actor_user_id=actor.user_id,
            target_user_id=state.as_user_id,
            timestamp=datetime.now(UTC),
        )
        try:
            await self.audit_sink.emit(record)
        except Exception:
            logger.exception(f"Audit sink rejected {action} for actor {actor.user_id}")
