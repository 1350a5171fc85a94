from typing import List, Optional

from hubaccess.app.services.identity_provider import IIdentityProvider, IdentityListener
from hubaccess.domain.access import Identity
from hubaccess.result import Error, Return


class FakeIdentityProvider(IIdentityProvider):
    """In-memory identity provider; push() simulates sign-in/refresh events"""

    def __init__(self, identity: Optional[Identity] = None, error: Optional[Exception] = None):
        self.identity = identity
        self.error = error
        self.listeners: List[IdentityListener] = []
        self.sign_out_calls = 0

    async def authenticate(self, credentials: str):
        if self.identity is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid credentials"))
        return Return.ok(self.identity)

    async def get_current_identity(self) -> Optional[Identity]:
        if self.error is not None:
            raise self.error
        return self.identity

    def subscribe(self, on_change: IdentityListener):
        self.listeners.append(on_change)
        return lambda: self.listeners.remove(on_change)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1

    async def push(self, identity: Optional[Identity]) -> None:
        self.identity = identity
        for listener in list(self.listeners):
            await listener(identity)
