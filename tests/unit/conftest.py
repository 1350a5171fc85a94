import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)

    uow.tenants = MagicMock()
    uow.tenants.get_by_id = AsyncMock(return_value=None)
    uow.tenants.get_by_slug = AsyncMock(return_value=None)
    uow.tenants.get_settings = AsyncMock(return_value=None)
    uow.tenants.get_license = AsyncMock(return_value=None)

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_tenant = AsyncMock(return_value=None)
    uow.memberships.get_by_user_id = AsyncMock(return_value=[])
    uow.memberships.get_by_tenant_id = AsyncMock(return_value=[])
    uow.memberships.create = AsyncMock()
    uow.memberships.update = AsyncMock()
    uow.memberships.delete = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow
