"""
Change Member Role Use Case

Handles changing a member's role within a tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities import AuditEvent
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus
from hubaccess.domain.normalizer import parse_role, rank
from hubaccess.result import Error, Result, Return

from .dtos import MemberStandingResponse
from .policy import count_active_owners, load_actor_role, load_available_tenant


class ChangeMemberRoleUseCase:
    """
    Use case for changing a member's role within a tenant.

    Business Rules:
    - new_role accepts canonical or legacy tokens; anything else is INVALID_ROLE
    - Only ADMIN and OWNER (or a super-admin) can change roles
    - Only an OWNER can grant OWNER or change an owner's role
    - The last active owner cannot be demoted (CANNOT_REMOVE_LAST_OWNER)
    - Stored legacy tokens are rewritten to the canonical role
    - Creates audit event and invalidates cached access for the member
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[AccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(
        self, actor: Identity, slug: str, target_user_id: UUID, new_role: str
    ) -> Result[MemberStandingResponse]:
        """
        Execute change role use case.

        Args:
            actor: Identity making the change
            slug: Tenant slug
            target_user_id: User whose role is being changed
            new_role: Role token to assign

        Returns:
            Result with the member's new standing, or Error
        """
        role = parse_role(new_role)
        if role is None:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {new_role}. Must be one of: OWNER, ADMIN, MODERATOR, MEMBER",
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
            if rank(actor_role) < rank(MembershipRole.ADMIN):
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only owners and admins can change roles")
                )

            record = await self.uow.memberships.get_by_user_and_tenant(
                target_user_id, tenant.id
            )
            if record is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "User is not a member of this tenant")
                )
            current = ResolvedMembership.from_record(record)

            touches_owner = MembershipRole.OWNER in (current.role, role)
            if touches_owner and actor_role != MembershipRole.OWNER:
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Only owners can grant or revoke ownership")
                )

            if (
                current.role == MembershipRole.OWNER
                and role != MembershipRole.OWNER
                and current.status == MembershipStatus.ACTIVE
                and await count_active_owners(self.uow, tenant.id) == 1
            ):
                return Return.err(
                    Error("CANNOT_REMOVE_LAST_OWNER", "Cannot demote the last owner")
                )

            old_role = record.role
            record.role = role.value
            record.updated_at = datetime.utcnow()
            await self.uow.memberships.update(record)

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=actor.user_id,
                action="member_role_changed",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "old_role": old_role,
                    "new_role": role.value,
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
                role=role.value,
                status=current.status.value,
            )
        )
