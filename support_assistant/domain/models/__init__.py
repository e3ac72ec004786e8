"""
Domain models: intents, classification results, messages and sessions.
"""

from support_assistant.domain.models.intent import (
    NONE_INTENT,
    ClassificationMethod,
    ClassificationResult,
    Intent,
    TrainingExample,
)
from support_assistant.domain.models.message import Message, MessageRole, Transcript
from support_assistant.domain.models.conversation import (
    ConversationSession,
    PendingCorrection,
    TurnState,
)

__all__ = [
    "NONE_INTENT",
    "ClassificationMethod",
    "ClassificationResult",
    "Intent",
    "TrainingExample",
    "Message",
    "MessageRole",
    "Transcript",
    "ConversationSession",
    "PendingCorrection",
    "TurnState",
]
