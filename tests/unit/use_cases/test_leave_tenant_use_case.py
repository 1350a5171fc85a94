from uuid import uuid4

import pytest

from hubaccess.app.use_cases.memberships import LeaveTenantUseCase
from hubaccess.domain.access import Identity
from hubaccess.domain.entities import Membership, Tenant


@pytest.fixture
def tenant(mock_uow):
    tenant = Tenant(id=uuid4(), slug="acme", name="Acme Hub")
    mock_uow.tenants.get_by_slug.return_value = tenant
    return tenant


@pytest.fixture
def identity():
    return Identity(user_id=uuid4(), email="member@acme.com")


@pytest.mark.asyncio
async def test_member_can_leave(mock_uow, tenant, identity):
    membership = Membership(user_id=identity.user_id, tenant_id=tenant.id, role="member")
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership

    result = await LeaveTenantUseCase(mock_uow).execute(identity, "acme")

    assert result.is_ok()
    assert result.value.status == "left"
    mock_uow.memberships.delete.assert_awaited_once_with(membership)
    assert mock_uow.audit_events.create.call_args.args[0].action == "member_left"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_non_member_cannot_leave(mock_uow, tenant, identity):
    result = await LeaveTenantUseCase(mock_uow).execute(identity, "acme")

    assert result.error.code == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_last_owner_cannot_leave(mock_uow, tenant, identity):
    owner = Membership(user_id=identity.user_id, tenant_id=tenant.id, role="owner", status="active")
    mock_uow.memberships.get_by_user_and_tenant.return_value = owner
    mock_uow.memberships.get_by_tenant_id.return_value = [
        owner,
        Membership(user_id=uuid4(), tenant_id=tenant.id, role="owner", status="suspended"),
    ]

    result = await LeaveTenantUseCase(mock_uow).execute(identity, "acme")

    assert result.error.code == "CANNOT_REMOVE_LAST_OWNER"
    mock_uow.memberships.delete.assert_not_called()


@pytest.mark.asyncio
async def test_owner_can_leave_when_another_owner_remains(mock_uow, tenant, identity):
    owner = Membership(user_id=identity.user_id, tenant_id=tenant.id, role="OWNER", status="ACTIVE")
    mock_uow.memberships.get_by_user_and_tenant.return_value = owner
    mock_uow.memberships.get_by_tenant_id.return_value = [
        owner,
        Membership(user_id=uuid4(), tenant_id=tenant.id, role="OWNER", status="ACTIVE"),
    ]

    result = await LeaveTenantUseCase(mock_uow).execute(identity, "acme")

    assert result.is_ok()
