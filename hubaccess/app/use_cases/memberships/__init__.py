"""
Membership Administration Use Cases

Every mutation of a membership goes through here so cached access
decisions can be invalidated.
"""

from .change_role_use_case import ChangeMemberRoleUseCase
from .change_status_use_case import ChangeMemberStatusUseCase
from .dtos import LeaveTenantResponse, MemberStandingResponse
from .join_tenant_use_case import JoinTenantUseCase
from .leave_tenant_use_case import LeaveTenantUseCase

__all__ = [
    "JoinTenantUseCase",
    "LeaveTenantUseCase",
    "ChangeMemberRoleUseCase",
    "ChangeMemberStatusUseCase",
    "MemberStandingResponse",
    "LeaveTenantResponse",
]
