"""Port interface for transactional scopes inside one request / sweep."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    @abstractmethod
    def savepoint(self) -> AbstractAsyncContextManager[None]:
        """Nested transaction: rolled back alone if the block raises.

        The exception still propagates; the outer transaction stays usable.
        """
        ...
