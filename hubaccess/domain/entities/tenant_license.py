"""
TenantLicense Entity

License snapshot attached to a tenant. Only gates the join flow.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import LicenseStatus


class TenantLicense(SQLModel, table=True):
    """TenantLicense entity - at most one per tenant"""

    __tablename__ = "tenant_licenses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", unique=True, index=True)

    status: LicenseStatus = Field(default=LicenseStatus.ACTIVE)
    plan: str = Field(default="", max_length=100)
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    def is_usable(self, now: datetime) -> bool:
        if self.status not in (LicenseStatus.ACTIVE, LicenseStatus.CLAIMED):
            return False
        return self.expires_at is None or self.expires_at > now
