"""
Access Use Case DTOs (Data Transfer Objects)

Response classes for the access domain.
"""

from typing import List, Optional

from pydantic import BaseModel


class MembershipSummary(BaseModel):
    """One membership with the tenant it belongs to"""

    tenant_id: str
    slug: Optional[str]
    name: Optional[str]
    role: str
    status: str


class MyMembershipsResponse(BaseModel):
    """Response for list memberships use case"""

    memberships: List[MembershipSummary]
    highest_privilege: Optional[MembershipSummary]
    landing_route: str
