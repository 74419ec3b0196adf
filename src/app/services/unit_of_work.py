"""Unit of Work Interface

Scopes a transactional unit of work. Leaving the context without a
commit rolls back everything written inside it.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract unit of work

    Usage:
        async with uow:
            ...repository writes...
            await uow.commit()
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
