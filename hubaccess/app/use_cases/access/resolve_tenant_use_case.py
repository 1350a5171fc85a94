"""
Resolve Tenant Use Case

Loads tenant metadata, settings, license snapshot and the effective
membership of the current identity for a route's tenant slug.
"""

import asyncio
import logging
from typing import Optional, Tuple
from uuid import UUID

from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import (
    Identity,
    ImpersonationState,
    LicenseSnapshot,
    ResolvedMembership,
    SettingsSnapshot,
    TenantContext,
    TenantSnapshot,
)
from hubaccess.domain.entities import Tenant
from hubaccess.domain.entities.enums import MembershipRole, MembershipStatus
from hubaccess.result import Error, Result, Return

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class ResolveTenantUseCase:
    """
    Use case for resolving a tenant context.

    Business Rules:
    - Unknown, deleted or suspended tenants fail with TENANT_NOT_FOUND
    - An impersonating super-admin sees the impersonated user's stored
      membership (possibly none), never more
    - A super-admin without impersonation gets a virtual OWNER/ACTIVE membership
    - Anyone else gets their stored membership, or None (anonymous visitor,
      non-member); None is not an error
    - The whole lookup is bounded: FETCH_TIMEOUT / FETCH_FAILED on trouble
    """

    def __init__(self, uow: UnitOfWork, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.uow = uow
        self.timeout_seconds = timeout_seconds

    async def execute(
        self,
        slug: str,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState] = None,
    ) -> Result[TenantContext]:
        """
        Execute resolve tenant use case.

        Args:
            slug: Tenant slug taken from the route
            identity: Current identity, None for anonymous visitors
            impersonation: Active impersonation overlay of the identity, if any

        Returns:
            Result with TenantContext, or Error
        """
        try:
            return await asyncio.wait_for(
                self._resolve(slug, identity, impersonation),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"Tenant resolution for {slug!r} timed out after {self.timeout_seconds}s")
            return Return.err(Error("FETCH_TIMEOUT", "Tenant lookup timed out"))
        except Exception:
            logger.exception(f"Tenant resolution for {slug!r} failed")
            return Return.err(Error("FETCH_FAILED", "Tenant lookup failed"))

    async def _resolve(
        self,
        slug: str,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState],
    ) -> Result[TenantContext]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_slug(slug)
            if tenant is None or not tenant.is_available:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            settings_row = await self.uow.tenants.get_settings(tenant.id)
            license_row = await self.uow.tenants.get_license(tenant.id)
            membership, acting_as = await self._resolve_membership(
                tenant, identity, impersonation
            )

            # Snapshot while the rows are still loaded
            settings = SettingsSnapshot()
            if settings_row is not None:
                settings = SettingsSnapshot(
                    public_signup=settings_row.public_signup,
                    approval_required=settings_row.approval_required,
                    enabled_sections=tuple(settings_row.enabled_sections or ()),
                )

            license_snapshot = None
            if license_row is not None:
                license_snapshot = LicenseSnapshot(
                    status=license_row.status,
                    plan=license_row.plan,
                    expires_at=license_row.expires_at,
                )

            tenant_snapshot = TenantSnapshot(
                id=tenant.id, slug=tenant.slug, name=tenant.name, status=tenant.status
            )

        return Return.ok(
            TenantContext(
                tenant=tenant_snapshot,
                settings=settings,
                license=license_snapshot,
                membership=membership,
                acting_as=acting_as,
            )
        )

    async def _resolve_membership(
        self,
        tenant: Tenant,
        identity: Optional[Identity],
        impersonation: Optional[ImpersonationState],
    ) -> Tuple[Optional[ResolvedMembership], Optional[UUID]]:
        if identity is None:
            return None, None

        if identity.is_super_admin:
            if impersonation is not None and impersonation.applies_to(tenant.id):
                record = await self.uow.memberships.get_by_user_and_tenant(
                    impersonation.as_user_id, tenant.id
                )
                membership = ResolvedMembership.from_record(record) if record else None
                return membership, impersonation.as_user_id

            return (
                ResolvedMembership(
                    tenant_id=tenant.id,
                    role=MembershipRole.OWNER,
                    status=MembershipStatus.ACTIVE,
                    virtual=True,
                ),
                None,
            )

        record = await self.uow.memberships.get_by_user_and_tenant(identity.user_id, tenant.id)
        return (ResolvedMembership.from_record(record) if record else None), None
