"""
Leave Tenant Use Case

Removes the current identity's membership from a tenant.
"""

from typing import Optional

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities import AuditEvent
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus
from hubaccess.result import Error, Result, Return

from .dtos import LeaveTenantResponse
from .policy import count_active_owners, load_available_tenant


class LeaveTenantUseCase:
    """
    Business Rules:
    - Leaving removes the membership row
    - The last active owner cannot leave (CANNOT_REMOVE_LAST_OWNER)
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[AccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(self, identity: Identity, slug: str) -> Result[LeaveTenantResponse]:
        async with self.uow:
            tenant = await load_available_tenant(self.uow, slug)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            tenant_id = tenant.id

            record = await self.uow.memberships.get_by_user_and_tenant(
                identity.user_id, tenant.id
            )
            if record is None:
                return Return.err(
                    Error("NOT_A_MEMBER", "You are not a member of this tenant")
                )

            membership = ResolvedMembership.from_record(record)
            if (
                membership.role == MembershipRole.OWNER
                and membership.status == MembershipStatus.ACTIVE
                and await count_active_owners(self.uow, tenant.id) == 1
            ):
                return Return.err(
                    Error(
                        "CANNOT_REMOVE_LAST_OWNER",
                        "The last owner cannot leave the tenant",
                    )
                )

            await self.uow.memberships.delete(record)

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=identity.user_id,
                action="member_left",
                event_metadata={"role": membership.role.value},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_user(identity.user_id)
            self.cache.invalidate_tenant(tenant_id)

        return Return.ok(LeaveTenantResponse(status="left"))
