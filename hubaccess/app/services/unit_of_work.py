from abc import ABC, abstractmethod

from hubaccess.app.repositories.audit_event_repository import IAuditEventRepository
from hubaccess.app.repositories.membership_repository import IMembershipRepository
from hubaccess.app.repositories.tenant_repository import ITenantRepository
from hubaccess.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    tenants: ITenantRepository
    memberships: IMembershipRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
