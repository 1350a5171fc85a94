"""
Community Hub Domain Enums

Canonical vocabularies shared by entities and the access engine.
Raw strings coming from storage or route declarations are mapped onto
these through hubaccess.domain.normalizer, never compared directly.
"""

from enum import Enum


class PlatformRole(str, Enum):
    """Global (cross-tenant) privilege level"""

    USER = "USER"
    SUPER_ADMIN = "SUPER_ADMIN"


class TenantStatus(str, Enum):
    """Tenant status"""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class MembershipRole(str, Enum):
    """User role within a tenant"""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    MEMBER = "MEMBER"


class MembershipStatus(str, Enum):
    """Membership status"""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    BANNED = "BANNED"


class LicenseStatus(str, Enum):
    """Tenant license status"""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"
    CLAIMED = "CLAIMED"
