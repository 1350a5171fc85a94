"""
User Entity

Represents a person who can belong to multiple tenants.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from .membership import Membership


class User(SQLModel, table=True):
    """
    User entity - represents a person who can belong to multiple tenants.

    Business Rules:
    - Email must be unique across all users
    - platform_role is stored raw ("user", "super_admin", "SUPER_ADMIN", ...)
      and normalized on read; anything unrecognized is a plain USER
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: str = Field(default="", max_length=255)

    platform_role: str = Field(default="USER", max_length=32)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="user")
