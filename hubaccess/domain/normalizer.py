"""
Role/Status Normalizer

Single boundary where heterogeneous role and status tokens (legacy
lowercase names, canonical uppercase names, unknown garbage) are mapped
onto the canonical vocabularies. Pure, no I/O.
"""

import logging
from typing import Iterable, FrozenSet, Optional, Union

from hubaccess.domain.entities.enums import (
    MembershipRole,
    MembershipStatus,
    PlatformRole,
)

logger = logging.getLogger(__name__)

RoleToken = Union[str, MembershipRole, None]
StatusToken = Union[str, MembershipStatus, None]

# Legacy tokens that do not uppercase onto a canonical role.
# "employee" has no slot in the four-role model and collapses to MEMBER.
LEGACY_ROLE_ALIASES = {
    "SUPERVISOR": MembershipRole.MODERATOR,
    "EMPLOYEE": MembershipRole.MEMBER,
}

ROLE_RANK = {
    MembershipRole.MEMBER: 1,
    MembershipRole.MODERATOR: 2,
    MembershipRole.ADMIN: 3,
    MembershipRole.OWNER: 4,
}

ADMIN_CAPABLE_ROLES = frozenset(
    {MembershipRole.OWNER, MembershipRole.ADMIN, MembershipRole.MODERATOR}
)


def _token(raw) -> str:
    return str(raw or "").strip().upper()


def parse_role(raw: RoleToken) -> Optional[MembershipRole]:
    """Strict variant of normalize_role: None for unknown tokens."""
    if isinstance(raw, MembershipRole):
        return raw
    token = _token(raw)
    try:
        return MembershipRole(token)
    except ValueError:
        return LEGACY_ROLE_ALIASES.get(token)


def parse_status(raw: StatusToken) -> Optional[MembershipStatus]:
    """Strict variant of normalize_status: None for unknown tokens."""
    if isinstance(raw, MembershipStatus):
        return raw
    try:
        return MembershipStatus(_token(raw))
    except ValueError:
        return None


def normalize_role(raw: RoleToken) -> MembershipRole:
    """
    Map any role token onto the canonical role set.

    Unknown tokens fall back to MEMBER (least privilege) and are logged
    so operators can find the offending rows.
    """
    role = parse_role(raw)
    if role is None:
        logger.warning(f"Unknown role token {raw!r}, falling back to MEMBER")
        return MembershipRole.MEMBER
    return role


def normalize_status(raw: StatusToken) -> MembershipStatus:
    """
    Map any status token onto the canonical status set.

    Unknown tokens (including the legacy "inactive") fall back to PENDING
    so that they never grant unrestricted access.
    """
    status = parse_status(raw)
    if status is None:
        logger.warning(f"Unknown status token {raw!r}, falling back to PENDING")
        return MembershipStatus.PENDING
    return status


def normalize_roles(tokens: Iterable[RoleToken]) -> FrozenSet[MembershipRole]:
    if isinstance(tokens, str):
        tokens = [tokens]
    return frozenset(normalize_role(token) for token in tokens)


def normalize_platform_role(raw: Union[str, PlatformRole, None]) -> PlatformRole:
    if isinstance(raw, PlatformRole):
        return raw
    if _token(raw) == PlatformRole.SUPER_ADMIN.value:
        return PlatformRole.SUPER_ADMIN
    return PlatformRole.USER


def rank(role: MembershipRole) -> int:
    return ROLE_RANK[role]


def is_admin_capable(role: MembershipRole) -> bool:
    return role in ADMIN_CAPABLE_ROLES
