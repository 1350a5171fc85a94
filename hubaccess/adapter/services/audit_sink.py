from hubaccess.app.services.audit_sink import IAuditSink
from hubaccess.app.services.unit_of_work import UnitOfWork
from hubaccess.domain.access import AuditRecord
from hubaccess.domain.entities import AuditEvent


class UnitOfWorkAuditSink(IAuditSink):
    """Persists access audit records to the audit_events table"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def emit(self, record: AuditRecord) -> None:
        async with self.uow:
            event = AuditEvent(
                tenant_id=record.tenant_id,
                user_id=record.actor_user_id,
                action=record.action,
                event_metadata={
                    "target_user_id": str(record.target_user_id),
                    "timestamp": record.timestamp.isoformat(),
                },
            )
            await self.uow.audit_events.create(event)
            await self.uow.commit()
