"""
Community Hub Domain Entities

All persisted entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    PlatformRole,
    TenantStatus,
    MembershipRole,
    MembershipStatus,
    LicenseStatus,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .tenant_settings import TenantSettings
from .tenant_license import TenantLicense
from .membership import Membership
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "PlatformRole",
    "TenantStatus",
    "MembershipRole",
    "MembershipStatus",
    "LicenseStatus",
    # Entities
    "User",
    "Tenant",
    "TenantSettings",
    "TenantLicense",
    "Membership",
    "AuditEvent",
]
