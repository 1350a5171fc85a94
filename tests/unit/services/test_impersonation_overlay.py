from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from hubaccess.adapter.repositories.impersonation_repository import (
    InMemoryImpersonationRepository,
)
from hubaccess.app.services.access_cache import AccessCache
from hubaccess.app.services.impersonation import ImpersonationOverlay
from hubaccess.domain.access import Identity


@pytest.fixture
def super_admin():
    return Identity(user_id=uuid4(), email="root@example.com", platform_role="SUPER_ADMIN")


@pytest.fixture
def audit_sink():
    sink = AsyncMock()
    sink.emit = AsyncMock()
    return sink


@pytest.fixture
def repository():
    return InMemoryImpersonationRepository()


@pytest.fixture
def overlay(mock_uow, repository, audit_sink):
    return ImpersonationOverlay(mock_uow, repository, audit_sink, AccessCache())


def target_exists(mock_uow, has_membership=True):
    target = SimpleNamespace(id=uuid4(), email="member@example.com")
    mock_uow.users.get_by_id.return_value = target
    membership = SimpleNamespace(role="MEMBER", status="ACTIVE") if has_membership else None
    mock_uow.memberships.get_by_user_and_tenant.return_value = membership
    mock_uow.memberships.get_by_user_id.return_value = [membership] if membership else []
    return target


@pytest.mark.asyncio
async def test_start_impersonation_success(overlay, super_admin, mock_uow, repository, audit_sink):
    await overlay.bind(super_admin)
    target = target_exists(mock_uow)
    tenant_id = uuid4()

    result = await overlay.start_impersonation(target.id, tenant_id)

    assert result.is_ok()
    assert result.value.as_user_id == target.id
    assert result.value.tenant_id == tenant_id
    assert overlay.current_impersonation() == result.value
    assert await repository.get(super_admin.user_id) == result.value

    record = audit_sink.emit.call_args.args[0]
    assert record.action == "impersonation_started"
    assert record.actor_user_id == super_admin.user_id
    assert record.target_user_id == target.id
    assert record.tenant_id == tenant_id


@pytest.mark.asyncio
async def test_only_super_admins_can_impersonate(overlay, mock_uow, audit_sink):
    await overlay.bind(Identity(user_id=uuid4(), email="ada@example.com"))
    target = target_exists(mock_uow)

    result = await overlay.start_impersonation(target.id, uuid4())

    assert result.is_err()
    assert result.error.code == "IMPERSONATION_FORBIDDEN"
    assert overlay.current_impersonation() is None
    audit_sink.emit.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_target_is_rejected(overlay, super_admin, mock_uow):
    await overlay.bind(super_admin)
    mock_uow.users.get_by_id.return_value = None

    result = await overlay.start_impersonation(uuid4(), uuid4())

    assert result.is_err()
    assert result.error.code == "IMPERSONATION_TARGET_INVALID"
    assert overlay.current_impersonation() is None


@pytest.mark.asyncio
async def test_target_without_membership_is_rejected(overlay, super_admin, mock_uow):
    await overlay.bind(super_admin)
    target = target_exists(mock_uow, has_membership=False)

    result = await overlay.start_impersonation(target.id, uuid4())
    assert result.error.code == "IMPERSONATION_TARGET_INVALID"

    result = await overlay.start_impersonation(target.id)
    assert result.error.code == "IMPERSONATION_TARGET_INVALID"
    assert overlay.current_impersonation() is None


@pytest.mark.asyncio
async def test_stop_impersonation_is_idempotent(overlay, super_admin, mock_uow, repository, audit_sink):
    await overlay.bind(super_admin)
    target = target_exists(mock_uow)
    started = (await overlay.start_impersonation(target.id)).value

    stopped = await overlay.stop_impersonation()
    again = await overlay.stop_impersonation()

    assert stopped == started
    assert again is None
    assert await repository.get(super_admin.user_id) is None
    actions = [call.args[0].action for call in audit_sink.emit.call_args_list]
    assert actions == ["impersonation_started", "impersonation_stopped"]


@pytest.mark.asyncio
async def test_replacing_an_overlay_audits_the_stop(overlay, super_admin, mock_uow, audit_sink):
    await overlay.bind(super_admin)
    target = target_exists(mock_uow)
    await overlay.start_impersonation(target.id)
    await overlay.start_impersonation(target.id, uuid4())

    actions = [call.args[0].action for call in audit_sink.emit.call_args_list]
    assert actions == ["impersonation_started", "impersonation_stopped", "impersonation_started"]


@pytest.mark.asyncio
async def test_failing_audit_sink_does_not_block(overlay, super_admin, mock_uow, audit_sink):
    audit_sink.emit.side_effect = RuntimeError("audit store down")
    await overlay.bind(super_admin)
    target = target_exists(mock_uow)

    result = await overlay.start_impersonation(target.id)

    assert result.is_ok()
    assert overlay.current_impersonation() is not None


@pytest.mark.asyncio
async def test_sign_out_clears_overlay(overlay, super_admin, mock_uow, repository):
    await overlay.on_identity_change(super_admin)
    target = target_exists(mock_uow)
    await overlay.start_impersonation(target.id)

    await overlay.on_identity_change(None)

    assert overlay.current_impersonation() is None
    assert overlay.actor is None
    assert await repository.get(super_admin.user_id) is None


@pytest.mark.asyncio
async def test_identity_switch_clears_overlay(overlay, super_admin, mock_uow, repository):
    await overlay.on_identity_change(super_admin)
    target = target_exists(mock_uow)
    await overlay.start_impersonation(target.id)

    other_admin = Identity(user_id=uuid4(), email="ops@example.com", platform_role="SUPER_ADMIN")
    await overlay.on_identity_change(other_admin)

    assert overlay.current_impersonation() is None
    assert await repository.get(super_admin.user_id) is None


@pytest.mark.asyncio
async def test_overlay_survives_token_refresh(overlay, super_admin, mock_uow):
    await overlay.on_identity_change(super_admin)
    target = target_exists(mock_uow)
    started = (await overlay.start_impersonation(target.id)).value

    await overlay.on_identity_change(super_admin)

    assert overlay.current_impersonation() == started


@pytest.mark.asyncio
async def test_overlays_are_not_shared_between_actors(mock_uow, repository, audit_sink, super_admin):
    first = ImpersonationOverlay(mock_uow, repository, audit_sink)
    await first.bind(super_admin)
    target = target_exists(mock_uow)
    await first.start_impersonation(target.id)

    second = ImpersonationOverlay(mock_uow, repository, audit_sink)
    await second.bind(Identity(user_id=uuid4(), email="ops@example.com", platform_role="SUPER_ADMIN"))

    assert second.current_impersonation() is None
