"""
Fuzzy full-text index over intent metadata.

Each query is compared against every title, description, example and response
of the catalog. The distance of a field is the share of query characters that
cannot be found, in order, inside matching fragments of at least
``min_match_length`` characters. An intent's distance is its best field; intents
above ``threshold`` are dropped.
"""

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from support_assistant.domain.interfaces.search_interface import IntentSearchInterface
from support_assistant.domain.models.intent import Intent
from support_assistant.utils.text import fold_text

DEFAULT_THRESHOLD = 0.4
DEFAULT_MIN_MATCH_LENGTH = 3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchHit:
    """A ranked search match."""
    intent: Intent
    distance: float
    field: str


def fragment_distance(query: str, text: str, min_match_length: int = DEFAULT_MIN_MATCH_LENGTH) -> float:
    """
    Approximate-substring distance between a query and a text.

    Args:
        query: Folded query text
        text: Folded field text
        min_match_length: Shortest matching fragment that counts

    Returns:
        0.0 when the whole query occurs in the text, 1.0 when nothing matches
    """
    if not query or not text:
        return 1.0
    matcher = SequenceMatcher(None, query, text, autojunk=False)
    matched = sum(
        block.size
        for block in matcher.get_matching_blocks()
        if block.size >= min_match_length
    )
    return 1.0 - min(matched, len(query)) / len(query)


class LexicalIndex(IntentSearchInterface):
    """
    Immutable fuzzy index built from one catalog snapshot.
    Rebuild a new index when the catalog changes instead of patching this one.
    """

    SEARCH_KEYS = ("title", "description", "examples", "response")

    def __init__(
        self,
        intents: Sequence[Intent],
        threshold: float = DEFAULT_THRESHOLD,
        min_match_length: int = DEFAULT_MIN_MATCH_LENGTH
    ):
        """
        Build the index.

        Args:
            intents: Catalog snapshot, in catalog order
            threshold: Maximum distance kept in results (0 exact, 1 anything)
            min_match_length: Shortest matching fragment that counts
        """
        self.threshold = threshold
        self.min_match_length = min_match_length
        self._intents: Tuple[Intent, ...] = tuple(intents)
        self._by_id: Dict[str, Intent] = {intent.id: intent for intent in self._intents}
        self._documents: List[List[Tuple[str, str]]] = [
            self._fields(intent) for intent in self._intents
        ]

    def _fields(self, intent: Intent) -> List[Tuple[str, str]]:
        fields = [
            ("title", fold_text(intent.title)),
            ("description", fold_text(intent.description)),
            ("response", fold_text(intent.response)),
        ]
        fields.extend(("examples", fold_text(example)) for example in intent.examples)
        return [(name, text) for name, text in fields if text]

    @property
    def intents(self) -> List[Intent]:
        return list(self._intents)

    def __len__(self) -> int:
        return len(self._intents)

    def get(self, intent_id: str) -> Optional[Intent]:
        return self._by_id.get(intent_id)

    def search_hits(self, query: str) -> List[SearchHit]:
        """
        Rank intents against a query, keeping distances.

        Args:
            query: Free-form user text

        Returns:
            Hits ordered by distance, then catalog order. A blank query
            lists the whole catalog; text with nothing searchable left after
            folding (punctuation, emoji) matches nothing.
        """
        if not (query or "").strip():
            return [SearchHit(intent, 0.0, "") for intent in self._intents]

        folded = fold_text(query)
        if not folded:
            return []

        ranked: List[Tuple[float, int, SearchHit]] = []
        for position, (intent, fields) in enumerate(zip(self._intents, self._documents)):
            best_distance, best_field = 1.0, ""
            for name, text in fields:
                distance = fragment_distance(folded, text, self.min_match_length)
                if distance < best_distance:
                    best_distance, best_field = distance, name
                if best_distance == 0.0:
                    break
            if best_distance <= self.threshold:
                ranked.append((best_distance, position, SearchHit(intent, best_distance, best_field)))

        ranked.sort(key=lambda item: (item[0], item[1]))
        logger.debug(f"Lexical search for '{folded[:50]}' matched {len(ranked)} intents")
        return [hit for _, _, hit in ranked]

    def search(self, query: str) -> List[Intent]:
        return [hit.intent for hit in self.search_hits(query)]
