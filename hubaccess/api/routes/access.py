from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from hubaccess.api.error import ClientError, ServerError
from hubaccess.app.services.access_session import AccessSession
from hubaccess.app.use_cases.access import AuthorizeRouteUseCase
from hubaccess.depends import get_access_session, get_route_guard, get_route_table
from hubaccess.domain.guard import RouteGuard
from hubaccess.domain.route_table import RouteTable

router = APIRouter(prefix="/access", tags=["Access"])


class AuthorizeRequest(BaseModel):
    """
    Authorize HTTP request payload

    The application path the client is about to render.
    """

    path: str = Field(..., min_length=1, description="Requested path, e.g. /c/acme/events")


class DecisionResponse(BaseModel):
    """Guard decision: GRANT, DEFER or REDIRECT (with target)"""

    kind: str
    to: Optional[str] = None
    rule: Optional[str] = None


@router.post("/authorize", status_code=status.HTTP_200_OK, response_model=DecisionResponse)
async def authorize_route(
    request: AuthorizeRequest,
    session: AccessSession = Depends(get_access_session),
    route_table: RouteTable = Depends(get_route_table),
    guard: RouteGuard = Depends(get_route_guard),
):
    """
    Authorize Navigation

    Evaluates the route guard for the caller (anonymous when no bearer
    token is sent) and returns exactly one decision.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND (render the not-found page)
        - 500 Internal Server Error: Server error
    """
    use_case = AuthorizeRouteUseCase(session, route_table, guard)
    result = await use_case.execute(request.path)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    decision = result.value
    return DecisionResponse(kind=decision.kind.value, to=decision.to, rule=decision.rule)
