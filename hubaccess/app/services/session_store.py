"""
Session Store

Holds the authenticated identity and tells dependents (membership
directory, impersonation overlay, ...) when it changes. Listeners run
after the identity is fully updated, in subscription order.
"""

import logging
from typing import List, Optional

from hubaccess.app.services.identity_provider import (
    IIdentityProvider,
    IdentityListener,
    Unsubscribe,
)
from hubaccess.domain.access import Identity

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Business Rules:
    - loading stays True until the identity provider has answered once
    - Provider failures keep the last known identity and leave loading=True,
      which the Guard turns into DEFER
    - sign_out is idempotent
    """

    def __init__(self, provider: IIdentityProvider):
        self.provider = provider
        self.loading = True
        self._identity: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []
        self._provider_unsubscribe: Optional[Unsubscribe] = None

    def get_identity(self) -> Optional[Identity]:
        return self._identity

    def on_identity_change(self, callback: IdentityListener) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def load(self) -> Optional[Identity]:
        """Ask the provider for the current identity and follow its changes."""
        if self._provider_unsubscribe is None:
            self._provider_unsubscribe = self.provider.subscribe(self._on_provider_change)

        try:
            identity = await self.provider.get_current_identity()
        except Exception:
            logger.exception("Identity provider unreachable, keeping last known identity")
            self.loading = True
            return self._identity

        await self._apply(identity)
        return identity

    async def sign_in(self, identity: Identity) -> None:
        await self._apply(identity)

    async def refresh(self, identity: Identity) -> None:
        """Token refresh: same user, possibly new claims"""
        await self._apply(identity)

    async def sign_out(self) -> None:
        await self.provider.sign_out()
        if self._identity is None and not self.loading:
            return
        await self._apply(None)

    def dispose(self) -> None:
        if self._provider_unsubscribe is not None:
            self._provider_unsubscribe()
            self._provider_unsubscribe = None
        self._listeners.clear()

    async def _on_provider_change(self, identity: Optional[Identity]) -> None:
        await self._apply(identity)

    async def _apply(self, identity: Optional[Identity]) -> None:
        self._identity = identity
        self.loading = False
        for listener in list(self._listeners):
            await listener(identity)
