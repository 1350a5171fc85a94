from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from hubaccess.app.repositories.tenant_repository import ITenantRepository
from hubaccess.domain.entities import Tenant, TenantLicense, TenantSettings


class TenantRepository(ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        """Get tenant by slug (slugs are stored lowercase)"""
        stmt = select(Tenant).where(Tenant.slug == slug.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_settings(self, tenant_id: UUID) -> Optional[TenantSettings]:
        """Get tenant settings row"""
        stmt = select(TenantSettings).where(TenantSettings.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_license(self, tenant_id: UUID) -> Optional[TenantLicense]:
        """Get tenant license snapshot"""
        stmt = select(TenantLicense).where(TenantLicense.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant
