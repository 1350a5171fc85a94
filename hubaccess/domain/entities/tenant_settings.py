"""
TenantSettings Entity

Per-tenant registration and visibility settings.
"""

from typing import List
from uuid import UUID

from sqlmodel import JSON, Column, Field, SQLModel


class TenantSettings(SQLModel, table=True):
    """
    TenantSettings entity - one row per tenant.

    Business Rules:
    - public_signup closes the join flow when False
    - approval_required makes new memberships start as PENDING
    - enabled_sections is an ordered list of member section names
    """

    __tablename__ = "tenant_settings"

    tenant_id: UUID = Field(foreign_key="tenants.id", primary_key=True)

    public_signup: bool = Field(default=True)
    approval_required: bool = Field(default=False)
    enabled_sections: List[str] = Field(default_factory=list, sa_column=Column(JSON))
