"""
Identity provider interface.

The access engine consumes identities; it never authenticates users
itself.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from hubaccess.domain.access import Identity
from hubaccess.result import Result

IdentityListener = Callable[[Optional[Identity]], Awaitable[None]]
Unsubscribe = Callable[[], None]


class IIdentityProvider(ABC):
    @abstractmethod
    async def authenticate(self, credentials: str) -> Result[Identity]:
        """Exchange credentials for an identity"""
        pass

    @abstractmethod
    async def get_current_identity(self) -> Optional[Identity]:
        """Current identity, None when signed out. May raise when unreachable."""
        pass

    @abstractmethod
    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        """Be told about sign-in, sign-out and token refresh"""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass
