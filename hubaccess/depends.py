from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from hubaccess.adapter.repositories.impersonation_repository import (
    InMemoryImpersonationRepository,
)
from hubaccess.adapter.services.audit_sink import UnitOfWorkAuditSink
from hubaccess.adapter.services.identity_provider import JwtIdentityProvider
from hubaccess.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from hubaccess.app.repositories.impersonation_repository import IImpersonationRepository
from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.access_session import AccessSession
from hubaccess.app.services.identity_provider import IIdentityProvider
from hubaccess.app.services.impersonation import ImpersonationOverlay
from hubaccess.app.services.membership_directory import MembershipDirectory
from hubaccess.app.services.resolution_session import ResolutionSession
from hubaccess.app.services.session_store import SessionStore
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.app.use_cases.access import ResolveTenantUseCase
from hubaccess.domain.access import Identity
from hubaccess.domain.guard import RouteGuard
from hubaccess.domain.route_table import RouteTable, build_default_route_table

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Anonymous visitors are valid callers of most endpoints
security = HTTPBearer(auto_error=False)

# Process-wide state shared by every request
access_cache = AccessCache(ttl_seconds=ApplicationConfig.ACCESS_CACHE_TTL_SECONDS)
impersonation_repository = InMemoryImpersonationRepository()
route_guard = RouteGuard(ApplicationConfig.MEMBER_SECTIONS)
route_table = build_default_route_table(ApplicationConfig.MEMBER_SECTIONS)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_access_cache() -> AccessCache:
    return access_cache


def get_impersonation_repository() -> IImpersonationRepository:
    return impersonation_repository


def get_route_guard() -> RouteGuard:
    return route_guard


def get_route_table() -> RouteTable:
    return route_table


def get_identity_provider(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> IIdentityProvider:
    return JwtIdentityProvider(credentials.credentials if credentials else None)


async def get_access_session(
    provider: IIdentityProvider = Depends(get_identity_provider),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: AccessCache = Depends(get_access_cache),
    repository: IImpersonationRepository = Depends(get_impersonation_repository),
):
    """
    Per-request access session: identity, memberships, impersonation
    overlay and tenant resolution wired together and initialized.
    """
    timeout = ApplicationConfig.RESOLUTION_TIMEOUT_SECONDS
    session = AccessSession(
        session_store=SessionStore(provider),
        directory=MembershipDirectory(uow, cache, timeout_seconds=timeout),
        overlay=ImpersonationOverlay(uow, repository, UnitOfWorkAuditSink(uow), cache),
        resolution=ResolutionSession(
            ResolveTenantUseCase(uow, timeout_seconds=timeout), cache
        ),
    )
    await session.init()
    try:
        yield session
    finally:
        await session.dispose()


async def get_current_identity(
    session: AccessSession = Depends(get_access_session),
) -> Identity:
    """
    Dependency for endpoints that need a signed-in caller.

    Raises:
        HTTPException: 401 if there is no valid bearer token
    """
    if session.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return session.identity
