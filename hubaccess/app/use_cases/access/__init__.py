"""
Access Use Cases

Tenant resolution, route authorization and membership listing.
"""

from .authorize_route_use_case import AuthorizeRouteUseCase
from .dtos import MembershipSummary, MyMembershipsResponse
from .list_memberships_use_case import ListMembershipsUseCase
from .resolve_tenant_use_case import ResolveTenantUseCase

__all__ = [
    "AuthorizeRouteUseCase",
    "ListMembershipsUseCase",
    "ResolveTenantUseCase",
    "MembershipSummary",
    "MyMembershipsResponse",
]
