"""
Bearer token identity provider.

Identities come from the claims of an HS256 access token; the token is
fixed for the lifetime of the provider (one HTTP request).
"""

import logging
from typing import List, Optional
from uuid import UUID

from hubaccess.api.utils.jwt import verify_jwt
from hubaccess.app.services.identity_provider import (
    IIdentityProvider,
    IdentityListener,
    Unsubscribe,
)
from hubaccess.domain.access import Identity
from hubaccess.result import Error, Result, Return

logger = logging.getLogger(__name__)


def identity_from_claims(payload: dict) -> Identity:
    return Identity(
        user_id=UUID(payload["user_id"]),
        email=payload.get("email", ""),
        platform_role=payload.get("platform_role"),
    )


class JwtIdentityProvider(IIdentityProvider):
    def __init__(self, token: Optional[str] = None):
        self.token = token
        self._listeners: List[IdentityListener] = []

    async def authenticate(self, credentials: str) -> Result[Identity]:
        payload = verify_jwt(credentials)
        if payload is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid or expired token"))
        try:
            identity = identity_from_claims(payload)
        except (KeyError, ValueError):
            return Return.err(Error("INVALID_TOKEN", "Token is missing identity claims"))

        self.token = credentials
        for listener in list(self._listeners):
            await listener(identity)
        return Return.ok(identity)

    async def get_current_identity(self) -> Optional[Identity]:
        if self.token is None:
            return None
        payload = verify_jwt(self.token)
        if payload is None:
            logger.info("Bearer token rejected, treating request as anonymous")
            return None
        try:
            return identity_from_claims(payload)
        except (KeyError, ValueError):
            logger.warning("Bearer token carries no usable identity claims")
            return None

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        self._listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    async def sign_out(self) -> None:
        if self.token is None:
            return
        self.token = None
        for listener in list(self._listeners):
            await listener(None)
