"""
Access Session

Explicit context object wiring the session store, membership directory,
impersonation overlay and tenant resolution together for one session
(one HTTP request in the API). init() subscribes the dependents and
loads the identity; dispose() tears everything down.
"""

from typing import Callable, List, Optional

from hubaccess.app.services.impersonation import ImpersonationOverlay
from hubaccess.app.services.membership_directory import MembershipDirectory
from hubaccess.app.services.resolution_session import ResolutionSession
from hubaccess.app.services.session_store import SessionStore
from hubaccess.domain.access import Identity
from hubaccess.domain.entities.enums import PlatformRole


class AccessSession:
    def __init__(
        self,
        session_store: SessionStore,
        directory: MembershipDirectory,
        overlay: ImpersonationOverlay,
        resolution: ResolutionSession,
    ):
        self.session_store = session_store
        self.directory = directory
        self.overlay = overlay
        self.resolution = resolution
        self._unsubscribes: List[Callable[[], None]] = []

    async def init(self) -> "AccessSession":
        # Overlay first: the resolution reset below must see a cleared overlay
        self._unsubscribes = [
            self.session_store.on_identity_change(self.overlay.on_identity_change),
            self.session_store.on_identity_change(self.directory.refresh),
            self.session_store.on_identity_change(self._reset_resolution),
        ]
        await self.session_store.load()
        return self

    async def dispose(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []
        self.session_store.dispose()
        self.resolution.invalidate()

    @property
    def identity(self) -> Optional[Identity]:
        return self.session_store.get_identity()

    @property
    def identity_loading(self) -> bool:
        return self.session_store.loading or self.directory.loading

    def effective_platform_role(self) -> Optional[PlatformRole]:
        """
        Platform role handed to the Guard. While an impersonation overlay
        was applied to the resolved tenant, the acting super-admin is
        evaluated as a plain USER holding the impersonated membership.
        When the tenant could not be resolved, any active overlay counts
        as applying, since its scope cannot be checked.
        """
        identity = self.identity
        if identity is None:
            return None
        context = self.resolution.context
        if context is not None:
            if context.acting_as is not None:
                return PlatformRole.USER
            return identity.platform_role
        attempted = self.resolution.key is not None or self.resolution.loading
        if attempted and self.overlay.current_impersonation() is not None:
            return PlatformRole.USER
        return identity.platform_role

    async def resolve_tenant(self, slug: str) -> bool:
        return await self.resolution.ensure(
            slug, self.identity, self.overlay.current_impersonation()
        )

    async def _reset_resolution(self, identity: Optional[Identity]) -> None:
        self.resolution.invalidate()
