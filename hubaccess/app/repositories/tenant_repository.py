from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from hubaccess.domain.entities import Tenant, TenantLicense, TenantSettings


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        """Get tenant by slug"""
        pass

    @abstractmethod
    async def get_settings(self, tenant_id: UUID) -> Optional[TenantSettings]:
        """Get tenant settings row, None if the tenant has none"""
        pass

    @abstractmethod
    async def get_license(self, tenant_id: UUID) -> Optional[TenantLicense]:
        """Get tenant license snapshot, None if unlicensed"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass
