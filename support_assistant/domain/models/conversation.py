from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple
from enum import Enum
import asyncio

from support_assistant.domain.models.message import Transcript


class TurnState(str, Enum):
    """Resolution state of the current conversation turn."""
    IDLE = "idle"
    AWAITING_CLASSIFICATION = "awaiting_classification"
    ANSWERED = "answered"
    AMBIGUOUS_PENDING_CHOICE = "ambiguous_pending_choice"


@dataclass(frozen=True)
class PendingCorrection:
    """Utterance waiting for the user to name its correct intent."""
    utterance: str
    created_at: datetime = field(default_factory=datetime.utcnow)


class ConversationSession:
    """
    Session-scoped conversation state owned by the resolution orchestrator.

    Holds the transcript, the turn state and at most one pending correction.
    Turns of a single session are serialized through ``lock``.
    """

    def __init__(self, session_id: str, welcome_message: Optional[str] = None):
        """
        Initialize a session.

        Args:
            session_id: Identifier supplied by the calling transport
            welcome_message: Optional first bot message of the transcript
        """
        self.session_id = session_id
        self.transcript = Transcript()
        self.state = TurnState.IDLE
        self.pending_correction: Optional[PendingCorrection] = None
        self.offered_candidates: Tuple[str, ...] = ()
        self.created_at = datetime.utcnow()
        self.last_activity = self.created_at
        self.lock = asyncio.Lock()

        if welcome_message:
            self.transcript.add_bot(welcome_message)

    def touch(self) -> None:
        self.last_activity = datetime.utcnow()

    def start_turn(self, utterance: str) -> None:
        """
        Record a new user utterance.

        Any unresolved pending correction is superseded by this utterance.
        """
        self.touch()
        self.transcript.add_user(utterance)
        self.transcript.begin_processing()
        self.pending_correction = PendingCorrection(utterance=utterance)
        self.offered_candidates = ()
        self.state = TurnState.AWAITING_CLASSIFICATION

    def answer(self, text: str) -> None:
        """Finish the turn with a final reply and drop the pending correction."""
        self.transcript.complete(text)
        self.pending_correction = None
        self.offered_candidates = ()
        self.state = TurnState.ANSWERED

    def await_choice(self, prompt: str, candidate_ids: Sequence[str] = ()) -> None:
        """
        Finish the turn asking the user to pick a candidate.

        Keeps the pending correction and remembers which intents were offered.
        """
        self.transcript.complete(prompt)
        self.offered_candidates = tuple(candidate_ids)
        self.state = TurnState.AMBIGUOUS_PENDING_CHOICE

    def take_pending_correction(self) -> Optional[PendingCorrection]:
        pending = self.pending_correction
        self.pending_correction = None
        return pending

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "pending_correction": self.pending_correction.utterance if self.pending_correction else None,
            "offered_candidates": list(self.offered_candidates),
            "messages": [message.to_dict() for message in self.transcript],
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat()
        }

    def __repr__(self) -> str:
        return f"ConversationSession(id={self.session_id}, state={self.state.value}, " \
               f"messages={len(self.transcript)})"
