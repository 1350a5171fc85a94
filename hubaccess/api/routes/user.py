from fastapi import APIRouter, Depends, status

from hubaccess.api.error import ServerError
from hubaccess.app.services.access_session import AccessSession
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.app.use_cases.access import ListMembershipsUseCase, MyMembershipsResponse
from hubaccess.depends import get_access_session, get_current_identity, get_unit_of_work
from hubaccess.domain.access import Identity

router = APIRouter(tags=["User"])


@router.get(
    "/me/memberships",
    status_code=status.HTTP_200_OK,
    response_model=MyMembershipsResponse,
)
async def get_my_memberships(
    identity: Identity = Depends(get_current_identity),
    session: AccessSession = Depends(get_access_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    My Communities

    Lists the caller's active and pending memberships with the
    highest-privilege one and the route to land on after login.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired JWT
        - 500 Internal Server Error: Server error
    """
    use_case = ListMembershipsUseCase(uow, session.directory)
    result = await use_case.execute(identity)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
