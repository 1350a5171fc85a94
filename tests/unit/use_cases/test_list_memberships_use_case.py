from uuid import uuid4

import pytest

from hubaccess.app.services.membership_directory import MembershipDirectory
from hubaccess.app.use_cases.access import ListMembershipsUseCase
from hubaccess.domain.access import Identity
from hubaccess.domain.entities import Membership, Tenant


def make_tenant(slug: str) -> Tenant:
    return Tenant(id=uuid4(), slug=slug, name=slug.title())


@pytest.fixture
def identity():
    return Identity(user_id=uuid4(), email="ada@example.com")


async def list_for(mock_uow, identity, tenants, memberships):
    by_id = {tenant.id: tenant for tenant in tenants}
    mock_uow.tenants.get_by_id.side_effect = lambda tenant_id: by_id.get(tenant_id)
    mock_uow.memberships.get_by_user_id.return_value = memberships

    directory = MembershipDirectory(mock_uow)
    await directory.refresh(identity)
    return await ListMembershipsUseCase(mock_uow, directory).execute(identity)


@pytest.mark.asyncio
async def test_lists_active_and_pending_memberships(mock_uow, identity):
    acme, globex, initech = make_tenant("acme"), make_tenant("globex"), make_tenant("initech")
    memberships = [
        Membership(user_id=identity.user_id, tenant_id=acme.id, role="employee", status="active"),
        Membership(user_id=identity.user_id, tenant_id=globex.id, role="admin", status="pending"),
        Membership(user_id=identity.user_id, tenant_id=initech.id, role="owner", status="banned"),
    ]

    result = await list_for(mock_uow, identity, [acme, globex, initech], memberships)

    assert result.is_ok()
    response = result.value
    assert [(m.slug, m.role, m.status) for m in response.memberships] == [
        ("acme", "MEMBER", "ACTIVE"),
        ("globex", "ADMIN", "PENDING"),
    ]
    assert response.highest_privilege.slug == "acme"
    assert response.landing_route == "/c/acme/app"


@pytest.mark.asyncio
async def test_landing_route_prefers_highest_active_membership(mock_uow, identity):
    acme, globex = make_tenant("acme"), make_tenant("globex")
    memberships = [
        Membership(user_id=identity.user_id, tenant_id=acme.id, role="member", status="active"),
        Membership(user_id=identity.user_id, tenant_id=globex.id, role="supervisor", status="active"),
    ]

    result = await list_for(mock_uow, identity, [acme, globex], memberships)

    assert result.value.highest_privilege.slug == "globex"
    assert result.value.highest_privilege.role == "MODERATOR"
    assert result.value.landing_route == "/c/globex/admin"


@pytest.mark.asyncio
async def test_pending_only_user_lands_on_holding_page(mock_uow, identity):
    acme = make_tenant("acme")
    memberships = [
        Membership(user_id=identity.user_id, tenant_id=acme.id, role="member", status="pending"),
    ]

    result = await list_for(mock_uow, identity, [acme], memberships)

    assert result.value.highest_privilege is None
    assert result.value.landing_route == "/c/acme/pending"


@pytest.mark.asyncio
async def test_user_without_memberships_lands_on_directory(mock_uow, identity):
    result = await list_for(mock_uow, identity, [], [])

    assert result.value.memberships == []
    assert result.value.landing_route == "/communities"


@pytest.mark.asyncio
async def test_super_admin_lands_on_console(mock_uow):
    identity = Identity(user_id=uuid4(), email="root@hub.io", platform_role="SUPER_ADMIN")

    result = await list_for(mock_uow, identity, [], [])

    assert result.value.landing_route == "/super-admin"
