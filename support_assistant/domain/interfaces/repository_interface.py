from abc import ABC, abstractmethod
from typing import List

from ..models.intent import Intent


class IntentStoreInterface(ABC):
    """
    Read-only view of the intent catalog.
    Following the Repository pattern to abstract where intents are kept.
    """

    @abstractmethod
    async def list_intents(self) -> List[Intent]:
        """
        Retrieves a snapshot of the active intent catalog.

        Returns:
            Intents in catalog order

        Raises:
            ExternalServiceException: If the backing store cannot be reached
            ValidationException: If a stored record is malformed
        """
        pass
