"""
List Memberships Use Case

"My communities": the identity's active/pending memberships, the
highest-privilege one and the post-login landing route.
"""

from typing import Dict, Tuple
from uuid import UUID

from hubaccess.app.services.membership_directory import MembershipDirectory
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import Identity, ResolvedMembership
from hubaccess.domain.entities.enums import MembershipStatus
from hubaccess.domain.paths import default_landing_route
from hubaccess.result import Result, Return

from .dtos import MembershipSummary, MyMembershipsResponse


class ListMembershipsUseCase:
    """
    Business Rules:
    - Only ACTIVE and PENDING memberships are listed
    - Landing route: super-admin console, else the highest ACTIVE
      membership's home area, else a PENDING tenant's holding page,
      else the public community directory
    """

    def __init__(self, uow: UnitOfWork, directory: MembershipDirectory):
        self.uow = uow
        self.directory = directory

    async def execute(self, identity: Identity) -> Result[MyMembershipsResponse]:
        eligible = self.directory.eligible_memberships(self.directory.memberships)

        # tenant id -> (slug, name)
        tenants: Dict[UUID, Tuple[str, str]] = {}
        async with self.uow:
            for membership in eligible:
                tenant = await self.uow.tenants.get_by_id(membership.tenant_id)
                if tenant is not None:
                    tenants[membership.tenant_id] = (tenant.slug, tenant.name)

        def summarize(membership: ResolvedMembership) -> MembershipSummary:
            slug, name = tenants.get(membership.tenant_id, (None, None))
            return MembershipSummary(
                tenant_id=str(membership.tenant_id),
                slug=slug,
                name=name,
                role=membership.role.value,
                status=membership.status.value,
            )

        highest = self.directory.highest_privilege_membership(eligible)
        landing = highest or next(
            (m for m in eligible if m.status == MembershipStatus.PENDING), None
        )
        landing_slug = tenants.get(landing.tenant_id, (None, None))[0] if landing else None

        return Return.ok(
            MyMembershipsResponse(
                memberships=[summarize(m) for m in eligible],
                highest_privilege=summarize(highest) if highest else None,
                landing_route=default_landing_route(
                    identity.platform_role,
                    landing,
                    landing_slug,
                ),
            )
        )
