from typing import Dict, Optional
from uuid import UUID

from hubaccess.app.repositories.impersonation_repository import IImpersonationRepository
from hubaccess.domain.access import ImpersonationState


class InMemoryImpersonationRepository(IImpersonationRepository):
    """Process-local overlay storage; one entry per acting super-admin"""

    def __init__(self):
        self._states: Dict[UUID, ImpersonationState] = {}

    async def get(self, actor_user_id: UUID) -> Optional[ImpersonationState]:
        return self._states.get(actor_user_id)

    async def save(self, actor_user_id: UUID, state: ImpersonationState) -> None:
        self._states[actor_user_id] = state

    async def delete(self, actor_user_id: UUID) -> None:
        self._states.pop(actor_user_id, None)
