"""
Access Value Objects

Immutable inputs and outputs of the membership resolution and
route authorization engine.
"""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from hubaccess.domain.entities.enums import (
    LicenseStatus,
    MembershipRole,
    MembershipStatus,
    PlatformRole,
    TenantStatus,
)
from hubaccess.domain.normalizer import (
    normalize_platform_role,
    normalize_role,
    normalize_roles,
    normalize_status,
)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Identity(FrozenModel):
    """Authenticated identity; lives exactly as long as the session"""

    user_id: UUID
    email: str
    platform_role: PlatformRole = PlatformRole.USER

    @field_validator("platform_role", mode="before")
    @classmethod
    def _normalize_platform_role(cls, value):
        return normalize_platform_role(value)

    @property
    def is_super_admin(self) -> bool:
        return self.platform_role == PlatformRole.SUPER_ADMIN


class MembershipStanding(FrozenModel):
    """Role and status as seen by the Guard"""

    role: MembershipRole
    status: MembershipStatus

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value):
        return normalize_role(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return normalize_status(value)


class ResolvedMembership(MembershipStanding):
    """
    Normalized membership of a user in one tenant.

    virtual is set for the synthesized OWNER/ACTIVE membership that
    super-admins receive in every tenant.
    """

    tenant_id: UUID
    virtual: bool = False

    @classmethod
    def from_record(cls, record) -> "ResolvedMembership":
        return cls(tenant_id=record.tenant_id, role=record.role, status=record.status)


class TenantSnapshot(FrozenModel):
    id: UUID
    slug: str
    name: str
    status: TenantStatus


class SettingsSnapshot(FrozenModel):
    public_signup: bool = True
    approval_required: bool = False
    enabled_sections: Tuple[str, ...] = ()


class LicenseSnapshot(FrozenModel):
    status: LicenseStatus
    plan: str = ""
    expires_at: Optional[datetime] = None


class TenantContext(FrozenModel):
    """
    Everything the Tenant Resolver knows about one tenant for one identity.

    acting_as carries the impersonated user id for display purposes; the
    Guard never looks at it.
    """

    tenant: TenantSnapshot
    settings: SettingsSnapshot
    license: Optional[LicenseSnapshot] = None
    membership: Optional[ResolvedMembership] = None
    acting_as: Optional[UUID] = None


class ImpersonationState(FrozenModel):
    as_user_id: UUID
    tenant_id: Optional[UUID] = None
    started_at: datetime

    def applies_to(self, tenant_id: UUID) -> bool:
        return self.tenant_id is None or self.tenant_id == tenant_id


class RouteRequirement(FrozenModel):
    """Declared per protected route; role tokens may be legacy names"""

    required_roles: FrozenSet[MembershipRole]
    allow_pending: bool = False

    @field_validator("required_roles", mode="before")
    @classmethod
    def _expand_legacy_roles(cls, value):
        return normalize_roles(value)


class AuthorizationInput(FrozenModel):
    identity_loading: bool = False
    tenant_loading: bool = False
    platform_role: Optional[PlatformRole] = None
    membership: Optional[MembershipStanding] = None
    required_roles: FrozenSet[MembershipRole] = frozenset()
    allow_pending: bool = False
    tenant_slug: Optional[str] = None
    current_path: str = "/"

    @field_validator("required_roles", mode="before")
    @classmethod
    def _expand_legacy_roles(cls, value):
        return normalize_roles(value)


class DecisionKind(str, Enum):
    GRANT = "GRANT"
    REDIRECT = "REDIRECT"
    DEFER = "DEFER"


class Decision(FrozenModel):
    """
    Outcome of an authorization request.

    rule names the guard rule that produced the decision; it is only
    used for logs and diagnostics.
    """

    kind: DecisionKind
    to: Optional[str] = None
    rule: Optional[str] = None

    @classmethod
    def grant(cls) -> "Decision":
        return cls(kind=DecisionKind.GRANT)

    @classmethod
    def defer(cls) -> "Decision":
        return cls(kind=DecisionKind.DEFER)

    @classmethod
    def redirect(cls, to: str) -> "Decision":
        return cls(kind=DecisionKind.REDIRECT, to=to)

    @property
    def is_grant(self) -> bool:
        return self.kind == DecisionKind.GRANT

    @property
    def is_redirect(self) -> bool:
        return self.kind == DecisionKind.REDIRECT


class AuditRecord(FrozenModel):
    action: str
    tenant_id: Optional[UUID] = None
    actor_user_id: UUID
    target_user_id: UUID
    timestamp: datetime
