"""
Tenant Entity

Represents an isolated community within the platform.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import TenantStatus

if TYPE_CHECKING:
    from .membership import Membership


class Tenant(SQLModel, table=True):
    """
    Tenant entity - isolated community looked up by slug at route entry.

    Business Rules:
    - slug is unique and lowercase
    - Suspended or soft-deleted tenants resolve as not found
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(unique=True, index=True, max_length=120)
    name: str = Field(max_length=255)

    status: TenantStatus = Field(default=TenantStatus.ACTIVE)

    # Soft delete
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="tenant")

    __table_args__ = (Index("idx_tenant_status", "status"),)

    @property
    def is_available(self) -> bool:
        return self.deleted_at is None and self.status == TenantStatus.ACTIVE
