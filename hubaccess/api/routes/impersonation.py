from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from hubaccess.api.error import ClientError, ServerError
from hubaccess.app.services.access_session import AccessSession
from hubaccess.depends import get_access_session, get_current_identity
from hubaccess.domain.access import Identity, ImpersonationState

router = APIRouter(prefix="/impersonation", tags=["Impersonation"])


class StartImpersonationRequest(BaseModel):
    """
    Start impersonation HTTP request payload

    tenant_id omitted means the overlay applies in every tenant.
    """

    user_id: UUID = Field(..., description="User to act as")
    tenant_id: Optional[UUID] = Field(None, description="Tenant the overlay is limited to")


class ImpersonationResponse(BaseModel):
    """Active overlay of the caller, null when none"""

    active: bool
    as_user_id: Optional[str] = None
    tenant_id: Optional[str] = None
    started_at: Optional[datetime] = None


def to_response(state: Optional[ImpersonationState]) -> ImpersonationResponse:
    if state is None:
        return ImpersonationResponse(active=False)
    return ImpersonationResponse(
        active=True,
        as_user_id=str(state.as_user_id),
        tenant_id=str(state.tenant_id) if state.tenant_id else None,
        started_at=state.started_at,
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ImpersonationResponse)
async def start_impersonation(
    request: StartImpersonationRequest,
    identity: Identity = Depends(get_current_identity),
    session: AccessSession = Depends(get_access_session),
):
    """
    Start Impersonation

    Super-admins only. Replaces any overlay already active.

    Raises:
        - 400 Bad Request: IMPERSONATION_TARGET_INVALID
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: IMPERSONATION_FORBIDDEN
        - 500 Internal Server Error: Server error
    """
    result = await session.overlay.start_impersonation(request.user_id, request.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "IMPERSONATION_FORBIDDEN":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "IMPERSONATION_TARGET_INVALID":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return to_response(result.value)


@router.get("", status_code=status.HTTP_200_OK, response_model=ImpersonationResponse)
async def get_impersonation(
    identity: Identity = Depends(get_current_identity),
    session: AccessSession = Depends(get_access_session),
):
    return to_response(session.overlay.current_impersonation())


@router.delete("", status_code=status.HTTP_200_OK, response_model=ImpersonationResponse)
async def stop_impersonation(
    identity: Identity = Depends(get_current_identity),
    session: AccessSession = Depends(get_access_session),
):
    """Stop Impersonation - idempotent, returns the overlay that was stopped"""
    return to_response(await session.overlay.stop_impersonation())
