from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from hubaccess.app.services.session_store import SessionStore
from hubaccess.domain.access import Identity
from tests.utils.fakes import FakeIdentityProvider


@pytest.fixture
def identity():
    return Identity(user_id=uuid4(), email="ada@example.com")


@pytest.mark.asyncio
async def test_loading_until_provider_answers(identity):
    store = SessionStore(FakeIdentityProvider(identity))
    assert store.loading is True
    assert store.get_identity() is None

    await store.load()

    assert store.loading is False
    assert store.get_identity() == identity


@pytest.mark.asyncio
async def test_listeners_run_in_order_after_identity_is_set(identity):
    store = SessionStore(FakeIdentityProvider(identity))
    seen = []

    async def first(new_identity):
        seen.append(("first", new_identity, store.get_identity(), store.loading))

    async def second(new_identity):
        seen.append(("second", new_identity, store.get_identity(), store.loading))

    store.on_identity_change(first)
    store.on_identity_change(second)
    await store.load()

    assert seen == [
        ("first", identity, identity, False),
        ("second", identity, identity, False),
    ]


@pytest.mark.asyncio
async def test_unsubscribe_stops_notifications(identity):
    store = SessionStore(FakeIdentityProvider(identity))
    listener = AsyncMock()
    unsubscribe = store.on_identity_change(listener)
    unsubscribe()
    unsubscribe()

    await store.load()

    listener.assert_not_called()


@pytest.mark.asyncio
async def test_provider_failure_keeps_loading_and_last_identity(identity):
    provider = FakeIdentityProvider(identity)
    store = SessionStore(provider)
    await store.load()

    provider.error = ConnectionError("identity provider down")
    result = await store.load()

    assert result == identity
    assert store.get_identity() == identity
    assert store.loading is True


@pytest.mark.asyncio
async def test_provider_changes_are_followed(identity):
    provider = FakeIdentityProvider(None)
    store = SessionStore(provider)
    listener = AsyncMock()
    store.on_identity_change(listener)
    await store.load()

    await provider.push(identity)

    assert store.get_identity() == identity
    listener.assert_awaited_with(identity)


@pytest.mark.asyncio
async def test_sign_out_is_idempotent(identity):
    provider = FakeIdentityProvider(identity)
    store = SessionStore(provider)
    listener = AsyncMock()
    await store.load()
    store.on_identity_change(listener)

    await store.sign_out()
    await store.sign_out()

    assert store.get_identity() is None
    assert provider.sign_out_calls == 2
    listener.assert_awaited_once_with(None)


@pytest.mark.asyncio
async def test_dispose_detaches_from_provider(identity):
    provider = FakeIdentityProvider(identity)
    store = SessionStore(provider)
    await store.load()
    assert len(provider.listeners) == 1

    store.dispose()

    assert provider.listeners == []
