"""
Membership Entity

Links User to Tenant with a role and a status.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

if TYPE_CHECKING:
    from .user import User
    from .tenant import Tenant


class Membership(SQLModel, table=True):
    """
    Membership entity - links User to Tenant with a role.

    Business Rules:
    - One user can be member of multiple tenants
    - (user_id, tenant_id) must be unique
    - role and status are stored as raw tokens; legacy rows carry
      lowercase names (owner, admin, supervisor, employee, member)
    - Only ACTIVE memberships grant access
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    role: str = Field(default="MEMBER", max_length=32)
    status: str = Field(default="ACTIVE", max_length=32)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    user: "User" = Relationship(back_populates="memberships")
    tenant: "Tenant" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_user_tenant", "user_id", "tenant_id", unique=True),
        Index("idx_membership_status", "status"),
    )
