import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from hubaccess.api.utils.jwt import generate_jwt
from hubaccess.adapter.repositories.impersonation_repository import (
    InMemoryImpersonationRepository,
)
from hubaccess.app.services.access_cache import AccessCache
from hubaccess.depends import (
    get_access_cache,
    get_impersonation_repository,
    get_unit_of_work,
)
from hubaccess.adapter.services.unit_of_work import SqlAlchemyUnitOfWork


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db_session):
    return await TestDataLoader.seed(db_session)


@pytest_asyncio.fixture
def auth_headers(seeded):
    """auth_headers("member") -> bearer header for a seeded user"""

    def build(user_key: str) -> dict:
        user = seeded["users"][user_key]
        token = generate_jwt(user["id"], user["email"], user["platform_role"])
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest_asyncio.fixture
async def client(db_session):
    from httpx import ASGITransport
    from hubaccess.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    # Process-wide state must not leak between tests
    cache = AccessCache()
    repository = InMemoryImpersonationRepository()
    app.dependency_overrides[get_access_cache] = lambda: cache
    app.dependency_overrides[get_impersonation_repository] = lambda: repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
