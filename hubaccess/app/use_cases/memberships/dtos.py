"""
Membership Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel


class MemberStandingResponse(BaseModel):
    """Membership state after a join or an admin change"""

    tenant_id: str
    user_id: str
    role: str
    status: str


class LeaveTenantResponse(BaseModel):
    """Response for leave tenant use case"""

    status: str
