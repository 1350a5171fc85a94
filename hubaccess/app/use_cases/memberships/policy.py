"""
Shared checks for membership administration.
"""

from typing import Optional
from uuid import UUID

from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities import Tenant
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus


async def load_available_tenant(uow: UnitOfWork, slug: str) -> Optional[Tenant]:
    tenant = await uow.tenants.get_by_slug(slug)
    if tenant is None or not tenant.is_available:
        return None
    return tenant


async def load_actor_role(
    uow: UnitOfWork, actor: Identity, tenant_id: UUID
) -> Optional[MembershipRole]:
    """
    Role the actor administers the tenant with; None if the actor holds
    no ACTIVE membership. Super-admins administer every tenant as OWNER.
    """
    if actor.is_super_admin:
        return MembershipRole.OWNER
    record = await uow.memberships.get_by_user_and_tenant(actor.user_id, tenant_id)
    if record is None:
        return None
    membership = ResolvedMembership.from_record(record)
    if membership.status != MembershipStatus.ACTIVE:
        return None
    return membership.role


async def count_active_owners(uow: UnitOfWork, tenant_id: UUID) -> int:
    memberships = [
        ResolvedMembership.from_record(record)
        for record in await uow.memberships.get_by_tenant_id(tenant_id)
    ]
    return sum(
        1
        for m in memberships
        if m.role == MembershipRole.OWNER and m.status == MembershipStatus.ACTIVE
    )
