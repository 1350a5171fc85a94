"""
Join Tenant Use Case

Registers the current identity as a member of a tenant.
"""

from datetime import UTC, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity
from hubaccess.domain.entities import AuditEvent, Membership
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus
from hubaccess.result import Error, Result, Return

from .dtos import MemberStandingResponse
from .policy import load_available_tenant


class JoinTenantUseCase:
    """
    Business Rules:
    - Tenant must exist and be active
    - One membership per (user, tenant): ALREADY_A_MEMBER otherwise
    - public_signup=False closes registration (SIGNUP_CLOSED)
    - A licensed tenant needs a usable license (ACTIVE/CLAIMED, not expired)
    - approval_required puts the new member in PENDING, else ACTIVE
    - New members always start as MEMBER
    """

    def __init__(self, uow: UnitOfWork, cache: Optional[AccessCache] = None):
        self.uow = uow
        self.cache = cache

    async def execute(self, identity: Identity, slug: str) -> Result[MemberStandingResponse]:
        async with self.uow:
            tenant = await load_available_tenant(self.uow, slug)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            tenant_id = tenant.id

            existing = await self.uow.memberships.get_by_user_and_tenant(
                identity.user_id, tenant.id
            )
            if existing is not None:
                return Return.err(
                    Error("ALREADY_A_MEMBER", "You are already a member of this tenant")
                )

            settings = await self.uow.tenants.get_settings(tenant.id)
            if settings is not None and not settings.public_signup:
                return Return.err(
                    Error("SIGNUP_CLOSED", "This community does not accept new members")
                )

            license_row = await self.uow.tenants.get_license(tenant.id)
            now = datetime.now(UTC).replace(tzinfo=None)
            if license_row is not None and not license_row.is_usable(now):
                return Return.err(
                    Error("LICENSE_INACTIVE", "This community's license is not active")
                )

            approval_required = settings is not None and settings.approval_required
            status = MembershipStatus.PENDING if approval_required else MembershipStatus.ACTIVE

            membership = Membership(
                user_id=identity.user_id,
                tenant_id=tenant.id,
                role=MembershipRole.MEMBER.value,
                status=status.value,
            )
            try:
                await self.uow.memberships.create(membership)
            except IntegrityError:
                # A concurrent join won the unique (user, tenant) index
                await self.uow.rollback()
                return Return.err(
                    Error("ALREADY_A_MEMBER", "You are already a member of this tenant")
                )

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=identity.user_id,
                action="member_joined",
                event_metadata={"status": status.value},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

        if self.cache is not None:
            self.cache.invalidate_user(identity.user_id)

        return Return.ok(
            MemberStandingResponse(
                tenant_id=str(tenant_id),
                user_id=str(identity.user_id),
                role=MembershipRole.MEMBER.value,
                status=status.value,
            )
        )
