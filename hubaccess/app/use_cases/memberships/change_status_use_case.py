"""
Change Member Status Use Case

Approve pending members, suspend, ban or reactivate them.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities import AuditEvent
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus
from hubaccess.domain.normalizer import is_admin_capable, parse_status, rank
from hubaccess.result import Error, Result, Return

from .dtos import MemberStandingResponse
from .policy import count_active_owners, load_actor_role, load_available_tenant


class ChangeMemberStatusUseCase:
    """
    Business Rules:
    - new_status must be PENDING, ACTIVE, SUSPENDED or BANNED (INVALID_STATUS)
    - Any admin-capable role (OWNER, ADMIN, MODERATOR) may change statuses
    - Except for owners and super-admins, the target must rank strictly
      below the actor; nobody but a super-admin changes their own status
    - The last active owner cannot be deactivated (CANNOT_REMOVE_LAST_OWNER)
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[AccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self, actor: Identity, slug: str, target_user_id: UUID, new_status: str
    ) -> Result[MemberStandingResponse]:
        status = parse_status(new_status)
        if status is None:
            return Return.err(
                Error(
                    "INVALID_STATUS",
                    f"Invalid status: {new_status}. Must be one of: PENDING, ACTIVE, SUSPENDED, BANNED",
                )
            )

        async with self.uow:
            tenant = await load_available_tenant(self.uow, slug)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            tenant_id = tenant.id

            actor_role = await load_actor_role(self.uow, actor, tenant.id)
            if actor_role is None:
                return Return.err(
                    Error("NOT_A_MEMBER", "You are not a member of this tenant")
                )
            if not is_admin_capable(actor_role):
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only tenant staff can change member status")
                )

            record = await self.uow.memberships.get_by_user_and_tenant(
                target_user_id, tenant.id
            )
            if record is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "User is not a member of this tenant")
                )
            current = ResolvedMembership.from_record(record)

            if not actor.is_super_admin:
                if target_user_id == actor.user_id:
                    return Return.err(
                        Error("INSUFFICIENT_ROLE", "You cannot change your own status")
                    )
                if actor_role != MembershipRole.OWNER and rank(current.role) >= rank(actor_role):
                    return Return.err(
                        Error(
                            "INSUFFICIENT_ROLE",
                            "You can only change the status of lower-ranked members",
                        )
                    )

            if (
                current.role == MembershipRole.OWNER
                and current.status == MembershipStatus.ACTIVE
                and status != MembershipStatus.ACTIVE
                and await count_active_owners(self.uow, tenant.id) == 1
            ):
                return Return.err(
                    Error("CANNOT_REMOVE_LAST_OWNER", "Cannot deactivate the last owner")
                )

            old_status = record.status
            record.status = status.value
            record.updated_at = datetime.utcnow()
            await self.uow.memberships.update(record)

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=actor.user_id,
                action="member_status_changed",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "old_status": old_status,
                    "new_status": status.value,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_user(target_user_id)
            self.cache.invalidate_tenant(tenant_id)

        return Return.ok(
            MemberStandingResponse(
                tenant_id=str(tenant_id),
                user_id=str(target_user_id),
                role=current.role.value,
                status=status.value,
            )
        )
