"""
Service holding the active intent catalog and its lexical index.

The catalog snapshot and the index built from it are replaced together by
swapping a single reference, so in-flight searches always see one consistent
generation of both.
"""

from typing import List, Optional, Sequence, Tuple

from support_assistant.domain.interfaces.search_interface import IntentSearchInterface
from support_assistant.domain.models.intent import Intent
from support_assistant.infrastructure.search.lexical_index import (
    DEFAULT_MIN_MATCH_LENGTH,
    DEFAULT_THRESHOLD,
    LexicalIndex,
)
from support_assistant.utils.logger import get_logger


class IntentCatalog(IntentSearchInterface):
    """
    Atomically swappable view of the intent catalog.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        min_match_length: int = DEFAULT_MIN_MATCH_LENGTH
    ):
        """
        Initialize an empty catalog.

        Args:
            threshold: Fuzzy search distance cutoff
            min_match_length: Shortest fragment counted by fuzzy search
        """
        self.threshold = threshold
        self.min_match_length = min_match_length
        self._index = LexicalIndex([], threshold, min_match_length)
        self.logger = get_logger(__name__)

    @property
    def index(self) -> LexicalIndex:
        return self._index

    @property
    def intents(self) -> List[Intent]:
        return self._index.intents

    def __len__(self) -> int:
        return len(self._index)

    def replace(self, intents: Sequence[Intent]) -> LexicalIndex:
        """
        Rebuild the index from a new catalog snapshot and swap it in.

        Args:
            intents: New catalog snapshot

        Returns:
            The index now active
        """
        index = LexicalIndex(intents, self.threshold, self.min_match_length)
        self._index = index
        self.logger.info(f"Rebuilt lexical index with {len(index)} intents")
        return index

    def get(self, intent_id: str) -> Optional[Intent]:
        return self._index.get(intent_id)

    def search(self, query: str) -> List[Intent]:
        return self._index.search(query)

    def suggest(self, query: str, limit: int = 4) -> Tuple[List[Intent], bool]:
        """
        Quick suggestions for the chat widget.

        Args:
            query: Current input text; empty shows the catalog in order
            limit: Number of suggestions to show

        Returns:
            The first ``limit`` matches and whether more matches exist
        """
        matches = self._index.search(query)
        return matches[:limit], len(matches) > limit
