from abc import ABC, abstractmethod

from hubaccess.domain.access import AuditRecord


class IAuditSink(ABC):
    """Fire-and-forget destination for access audit records"""

    @abstractmethod
    async def emit(self, record: AuditRecord) -> None:
        pass
