from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from hubaccess.api.error import ClientError, ServerError
from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.access_session import AccessSession
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.app.use_cases.memberships import (
    ChangeMemberRoleUseCase,
    ChangeMemberStatusUseCase,
    JoinTenantUseCase,
    LeaveTenantResponse,
    LeaveTenantUseCase,
    MemberStandingResponse,
)
from hubaccess.depends import (
    get_access_cache,
    get_access_session,
    get_current_identity,
    get_unit_of_work,
)
from hubaccess.domain.access import (
    Identity,
    LicenseSnapshot,
    ResolvedMembership,
    SettingsSnapshot,
    TenantSnapshot,
)
from hubaccess.domain.entities.enums import PlatformRole
from hubaccess.result import Error

router = APIRouter(prefix="/tenants", tags=["Tenant"])

# Error code -> HTTP status for membership administration
MEMBERSHIP_ERROR_STATUS = {
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "MEMBERSHIP_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOT_A_MEMBER": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "SIGNUP_CLOSED": status.HTTP_403_FORBIDDEN,
    "LICENSE_INACTIVE": status.HTTP_403_FORBIDDEN,
    "ALREADY_A_MEMBER": status.HTTP_409_CONFLICT,
    "CANNOT_REMOVE_LAST_OWNER": status.HTTP_409_CONFLICT,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "INVALID_STATUS": status.HTTP_400_BAD_REQUEST,
}


def raise_membership_error(error: Error):
    status_code = MEMBERSHIP_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)


def parse_user_id(user_id: str) -> UUID:
    try:
        return UUID(user_id)
    except ValueError:
        raise ClientError(
            Error("INVALID_USER_ID", "Invalid user ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class TenantContextResponse(BaseModel):
    """
    Resolved tenant context HTTP response payload

    membership is null for anonymous visitors and non-members.
    """

    tenant: TenantSnapshot
    settings: SettingsSnapshot
    license: Optional[LicenseSnapshot] = None
    membership: Optional[ResolvedMembership] = None
    acting_as: Optional[UUID] = None
    effective_platform_role: Optional[PlatformRole] = None


@router.get(
    "/{slug}/context",
    status_code=status.HTTP_200_OK,
    response_model=TenantContextResponse,
)
async def get_tenant_context(
    slug: str,
    session: AccessSession = Depends(get_access_session),
):
    """
    Resolve Tenant Context

    Tenant metadata, settings, license snapshot and the caller's
    effective membership (impersonation applied).

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 503 Service Unavailable: FETCH_TIMEOUT / FETCH_FAILED
    """
    await session.resolve_tenant(slug)
    resolution = session.resolution

    if resolution.error is not None:
        if resolution.not_found:
            raise ClientError(resolution.error, status_code=status.HTTP_404_NOT_FOUND)
        raise ClientError(resolution.error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    context = resolution.context
    return TenantContextResponse(
        tenant=context.tenant,
        settings=context.settings,
        license=context.license,
        membership=context.membership,
        acting_as=context.acting_as,
        effective_platform_role=session.effective_platform_role(),
    )


@router.post(
    "/{slug}/join",
    status_code=status.HTTP_201_CREATED,
    response_model=MemberStandingResponse,
)
async def join_tenant(
    slug: str,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: AccessCache = Depends(get_access_cache),
):
    """
    Join Tenant

    Creates a MEMBER membership, PENDING when the tenant requires approval.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: SIGNUP_CLOSED or LICENSE_INACTIVE
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: ALREADY_A_MEMBER
    """
    use_case = JoinTenantUseCase(uow, cache)
    result = await use_case.execute(identity, slug)

    if result.is_err():
        raise_membership_error(result.error)

    return result.value


@router.post(
    "/{slug}/leave",
    status_code=status.HTTP_200_OK,
    response_model=LeaveTenantResponse,
)
async def leave_tenant(
    slug: str,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: AccessCache = Depends(get_access_cache),
):
    """
    Leave Tenant

    Raises:
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: NOT_A_MEMBER
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: CANNOT_REMOVE_LAST_OWNER
    """
    use_case = LeaveTenantUseCase(uow, cache)
    result = await use_case.execute(identity, slug)

    if result.is_err():
        raise_membership_error(result.error)

    return result.value


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="New role (owner/admin/moderator/member, legacy names accepted)")


@router.patch(
    "/{slug}/members/{user_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=MemberStandingResponse,
)
async def change_member_role(
    slug: str,
    user_id: str,
    request: ChangeRoleRequest,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: AccessCache = Depends(get_access_cache),
):
    """
    Change Member Role

    Requires ADMIN or OWNER; only owners touch ownership.

    Raises:
        - 400 Bad Request: Invalid user_id or INVALID_ROLE
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: NOT_A_MEMBER or INSUFFICIENT_ROLE
        - 404 Not Found: TENANT_NOT_FOUND or MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_REMOVE_LAST_OWNER
    """
    target_user_id = parse_user_id(user_id)

    use_case = ChangeMemberRoleUseCase(uow, cache)
    result = await use_case.execute(identity, slug, target_user_id, request.role)

    if result.is_err():
        raise_membership_error(result.error)

    return result.value


class ChangeStatusRequest(BaseModel):
    status: str = Field(..., description="New status (pending/active/suspended/banned)")


@router.patch(
    "/{slug}/members/{user_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=MemberStandingResponse,
)
async def change_member_status(
    slug: str,
    user_id: str,
    request: ChangeStatusRequest,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: AccessCache = Depends(get_access_cache),
):
    """
    Change Member Status

    Approve, suspend, ban or reactivate a member.

    Raises:
        - 400 Bad Request: Invalid user_id or INVALID_STATUS
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 403 Forbidden: NOT_A_MEMBER or INSUFFICIENT_ROLE
        - 404 Not Found: TENANT_NOT_FOUND or MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_REMOVE_LAST_OWNER
    """
    target_user_id = parse_user_id(user_id)

    use_case = ChangeMemberStatusUseCase(uow, cache)
    result = await use_case.execute(identity, slug, target_user_id, request.status)

    if result.is_err():
        raise_membership_error(result.error)

    return result.value
