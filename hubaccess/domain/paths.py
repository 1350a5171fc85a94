"""
Navigation targets produced by the access engine.
"""

from typing import Optional

from hubaccess.domain.entities.enums import MembershipStatus, PlatformRole
from hubaccess.domain.normalizer import is_admin_capable

LOGIN_PATH = "/login"
COMMUNITIES_PATH = "/communities"
SUPER_ADMIN_PATH = "/super-admin"


def tenant_path(slug: str, area: str) -> str:
    return f"/c/{slug}/{area}"


def join_path(slug: str) -> str:
    return tenant_path(slug, "join")


def pending_path(slug: str) -> str:
    return tenant_path(slug, "pending")


def admin_home_path(slug: str) -> str:
    return tenant_path(slug, "admin")


def member_home_path(slug: str) -> str:
    return tenant_path(slug, "app")


def split_path(path: str) -> list:
    return [segment for segment in (path or "").split("?")[0].split("/") if segment]


def is_within(path: str, target: str) -> bool:
    """True if path equals target or lies below it."""
    segments = split_path(path)
    target_segments = split_path(target)
    return segments[: len(target_segments)] == target_segments


def default_landing_route(
    platform_role: Optional[PlatformRole], membership, slug: Optional[str]
) -> str:
    """
    Post-login landing route.

    Args:
        platform_role: Identity's platform role (None for anonymous)
        membership: Highest-privilege membership (or a pending one), may be None
        slug: Slug of membership's tenant

    Returns:
        Path the user should land on
    """
    if platform_role == PlatformRole.SUPER_ADMIN:
        return SUPER_ADMIN_PATH
    if membership is None or not slug:
        return COMMUNITIES_PATH
    if membership.status == MembershipStatus.PENDING:
        return pending_path(slug)
    if membership.status != MembershipStatus.ACTIVE:
        return COMMUNITIES_PATH
    if is_admin_capable(membership.role):
        return admin_home_path(slug)
    return member_home_path(slug)
