from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.intent import Intent


class IntentSearchInterface(ABC):
    """
    Approximate text search over intent metadata.
    Any edit-distance tolerant ranking can stand behind this interface.
    """

    @abstractmethod
    def search(self, query: str) -> List[Intent]:
        """
        Ranks catalog intents against a free-form query.

        Args:
            query: User text; an empty query returns the whole catalog

        Returns:
            Matching intents, best match first
        """
        pass

    @abstractmethod
    def get(self, intent_id: str) -> Optional[Intent]:
        """
        Looks up an intent by id.

        Args:
            intent_id: Intent identifier

        Returns:
            The intent if indexed, None otherwise
        """
        pass
