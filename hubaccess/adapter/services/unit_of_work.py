from sqlmodel.ext.asyncio.session import AsyncSession

from hubaccess.adapter.repositories.audit_event_repository import AuditEventRepository
from hubaccess.adapter.repositories.membership_repository import MembershipRepository
from hubaccess.adapter.repositories.tenant_repository import TenantRepository
from hubaccess.adapter.repositories.user_repository import UserRepository
from hubaccess.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.tenants = TenantRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
