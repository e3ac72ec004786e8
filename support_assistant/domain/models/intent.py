from dataclasses import dataclass, field
from typing import Any, Dict, Tuple
from enum import Enum

from support_assistant.utils.exceptions import ValidationException

# Label the classifier reports when the utterance shares nothing with its vocabulary
NONE_INTENT = "None"


class ClassificationMethod(str, Enum):
    """Which stage of the classifier produced a result"""
    EXACT = "exact"
    MODEL = "model"
    GREETING = "greeting"
    NONE = "none"
    ERROR = "error"


@dataclass(frozen=True)
class Intent:
    """
    Catalog record describing one support intent.

    The ``id`` doubles as the classification label. Intents without examples
    stay searchable but contribute nothing to training.
    """
    id: str
    title: str
    description: str = ""
    examples: Tuple[str, ...] = field(default_factory=tuple)
    response: str = ""

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValidationException(
                message="Intent id cannot be empty",
                details={"field": "id"}
            )
        # Accept any sequence from callers but store an immutable tuple
        object.__setattr__(self, "examples", tuple(self.examples or ()))

    @property
    def is_trainable(self) -> bool:
        return any(example.strip() for example in self.examples)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Intent":
        """
        Build an intent from a store record.

        Args:
            data: Mapping with id, title, description, examples and response

        Returns:
            The intent

        Raises:
            ValidationException: If the record is malformed
        """
        if not isinstance(data, dict):
            raise ValidationException(
                message="Intent record must be an object",
                details={"type": type(data).__name__}
            )
        examples = data.get("examples") or []
        if isinstance(examples, str) or not all(isinstance(e, str) for e in examples):
            raise ValidationException(
                message="Intent examples must be a list of strings",
                details={"intent_id": data.get("id")}
            )
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or data.get("id", "")),
            description=str(data.get("description") or ""),
            examples=tuple(examples),
            response=str(data.get("response") or "")
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "examples": list(self.examples),
            "response": self.response
        }


@dataclass(frozen=True, order=True)
class TrainingExample:
    """One (utterance, intent id) pair of the classifier's training multiset."""
    utterance: str
    intent_id: str


@dataclass(frozen=True)
class ClassificationResult:
    """
    Immutable value object produced for every classified utterance.
    """
    intent_id: str
    answer: str
    score: float
    method: ClassificationMethod = ClassificationMethod.MODEL

    @property
    def has_intent(self) -> bool:
        return bool(self.intent_id) and self.intent_id != NONE_INTENT

    def is_confident(self, threshold: float) -> bool:
        """
        Whether the result names an intent with at least ``threshold`` confidence.

        Args:
            threshold: Minimum score in [0, 1]

        Returns:
            True if the result can be answered without disambiguation
        """
        return self.has_intent and self.score >= threshold

    @classmethod
    def empty(cls, method: ClassificationMethod = ClassificationMethod.ERROR) -> "ClassificationResult":
        return cls(intent_id="", answer="", score=0.0, method=method)
