from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from hubaccess.domain.access import ImpersonationState


class IImpersonationRepository(ABC):
    """
    Impersonation overlay storage, keyed by the acting super-admin.

    Never shared across actors: one actor's overlay must not be visible
    to any other user.
    """

    @abstractmethod
    async def get(self, actor_user_id: UUID) -> Optional[ImpersonationState]:
        """Get the actor's active overlay"""
        pass

    @abstractmethod
    async def save(self, actor_user_id: UUID, state: ImpersonationState) -> None:
        """Persist the actor's overlay"""
        pass

    @abstractmethod
    async def delete(self, actor_user_id: UUID) -> None:
        """Clear the actor's overlay (no-op when none)"""
        pass
