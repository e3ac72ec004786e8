"""
Service resolving user utterances to canned answers.

Per turn: classify the utterance; answer when confident; otherwise look for
candidate intents in the lexical index and either answer best-effort (zero or
one candidate) or ask the user to choose (several candidates). The user's
choice is fed back to the classifier through online learning.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union
import asyncio

from support_assistant.domain.interfaces.search_interface import IntentSearchInterface
from support_assistant.domain.models.conversation import ConversationSession
from support_assistant.domain.models.intent import ClassificationResult, Intent
from support_assistant.domain.services.learning_service import OnlineLearningCoordinator
from support_assistant.infrastructure.ai.intent.greetings import (
    GREETING_ANSWER,
    GREETING_INTENT,
    GREETING_SCORE,
    is_greeting,
)
from support_assistant.infrastructure.ai.intent.intent_classifier import IntentClassifier
from support_assistant.utils.exceptions import NotFoundException, ValidationException
from support_assistant.utils.logger import get_logger

# Fixed policy: bounds how often users are asked to disambiguate
CONFIDENCE_THRESHOLD = 0.5
MAX_CANDIDATES = 3

APOLOGY_MESSAGE = "No entendí tu mensaje."
CONNECTION_ERROR_MESSAGE = "Error en la conexión con el servicio de IA."
DISAMBIGUATION_PROMPT = "¿Te refieres a alguna de estas opciones?"
DECLINE_MESSAGE = "Lamento no haber podido ayudarte. Intenta describir tu consulta con otras palabras."


@dataclass(frozen=True)
class Candidate:
    """Intent offered to the user during disambiguation."""
    id: str
    title: str

    @classmethod
    def from_intent(cls, intent: Intent) -> "Candidate":
        return cls(id=intent.id, title=intent.title)


@dataclass(frozen=True)
class Answered:
    """Turn resolved with a final answer."""
    answer: str
    score: float
    intent_id: str
    ambiguous: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ambiguous": False,
            "answer": self.answer,
            "score": self.score,
            "intent_id": self.intent_id
        }


@dataclass(frozen=True)
class Ambiguous:
    """Turn waiting for the user to pick one of several candidate intents."""
    candidates: Tuple[Candidate, ...]
    ambiguous: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ambiguous": True,
            "candidates": [{"id": c.id, "title": c.title} for c in self.candidates]
        }


@dataclass(frozen=True)
class Confirmation:
    """Result of a disambiguation choice."""
    answer: str
    intent_id: str
    learned: bool


ResolutionResult = Union[Answered, Ambiguous]


class ResolutionOrchestrator:
    """
    Request-level state machine tying classifier, lexical index and online
    learning together for one conversation session at a time.
    """

    def __init__(
        self,
        classifier: IntentClassifier,
        catalog: IntentSearchInterface,
        learner: OnlineLearningCoordinator
    ):
        """
        Initialize the orchestrator with dependencies.

        Args:
            classifier: Shared intent classifier
            catalog: Fuzzy search over the active intent catalog
            learner: Coordinator applying confirmed corrections
        """
        self.classifier = classifier
        self.catalog = catalog
        self.learner = learner
        self.logger = get_logger(__name__)

    async def resolve(self, session: ConversationSession, utterance: str) -> ResolutionResult:
        """
        Resolve a new user utterance.

        A new utterance always starts a new turn, abandoning any pending
        correction from an earlier ambiguous turn without learning from it.

        Args:
            session: Conversation session
            utterance: User text

        Returns:
            Answered, or Ambiguous with up to MAX_CANDIDATES candidates

        Raises:
            ValidationException: If the utterance is blank
        """
        if not utterance or not utterance.strip():
            raise ValidationException(
                message="Message cannot be empty",
                details={"field": "message"}
            )

        async with session.lock:
            session.start_turn(utterance)

            try:
                result: ClassificationResult = await asyncio.to_thread(self.classifier.classify, utterance)
            except Exception as e:
                self.logger.error(
                    f"Classification failed for session {session.session_id}: {str(e)}",
                    exc_info=True
                )
                session.answer(CONNECTION_ERROR_MESSAGE)
                return Answered(answer=CONNECTION_ERROR_MESSAGE, score=0.0, intent_id="")

            self.logger.info(
                f"Classified message for session {session.session_id}",
                extra={"intent_id": result.intent_id, "score": result.score, "method": result.method.value}
            )

            if result.is_confident(CONFIDENCE_THRESHOLD):
                answer = self._answer_for(result)
                session.answer(answer)
                return Answered(answer=answer, score=result.score, intent_id=result.intent_id)

            # A weak match for a plain greeting is still a greeting
            if is_greeting(utterance):
                session.answer(GREETING_ANSWER)
                return Answered(answer=GREETING_ANSWER, score=GREETING_SCORE, intent_id=GREETING_INTENT)

            candidates = await self._candidates(utterance)

            if len(candidates) <= 1:
                answer = result.answer or APOLOGY_MESSAGE
                session.answer(answer)
                return Answered(
                    answer=answer,
                    score=result.score,
                    intent_id=result.intent_id if result.has_intent else ""
                )

            session.await_choice(DISAMBIGUATION_PROMPT, [c.id for c in candidates])
            self.logger.info(
                f"Ambiguous message for session {session.session_id}",
                extra={"candidates": [c.id for c in candidates]}
            )
            return Ambiguous(candidates=tuple(candidates))

    async def confirm_disambiguation(
        self,
        session: ConversationSession,
        intent_id: str,
        utterance: Optional[str] = None
    ) -> Confirmation:
        """
        Apply the user's choice of intent for the pending utterance.

        The session's pending correction is learned against the chosen
        intent. ``utterance`` is only used when the session holds no pending
        correction, for callers that keep the last query on their side.

        Args:
            session: Conversation session
            intent_id: Intent picked by the user
            utterance: Fallback utterance to learn from

        Returns:
            The chosen intent's answer and whether learning took place

        Raises:
            ValidationException: If the intent id is blank
        """
        if not intent_id or not intent_id.strip():
            raise ValidationException(
                message="Intent id is required",
                details={"field": "intent_id"}
            )

        async with session.lock:
            session.touch()
            offered = session.offered_candidates
            if offered and intent_id not in offered:
                self.logger.warning(
                    f"Session {session.session_id} picked an intent that was not offered: {intent_id}",
                    extra={"intent_id": intent_id, "candidates": list(offered)}
                )

            intent = self.catalog.get(intent_id)
            session.transcript.add_user(intent.title if intent else intent_id)
            session.transcript.begin_processing()

            pending = session.take_pending_correction()
            source = pending.utterance if pending else (utterance or "").strip()

            learned = False
            if source:
                try:
                    await asyncio.to_thread(self.learner.learn, source, intent_id)
                    learned = True
                except Exception as e:
                    self.logger.error(
                        f"Learning failed for session {session.session_id}: {str(e)}",
                        exc_info=True
                    )
                    session.answer(CONNECTION_ERROR_MESSAGE)
                    return Confirmation(answer=CONNECTION_ERROR_MESSAGE, intent_id=intent_id, learned=False)

            answer = intent.response if intent and intent.response else APOLOGY_MESSAGE
            session.answer(answer)
            return Confirmation(answer=answer, intent_id=intent_id, learned=learned)

    async def decline_disambiguation(self, session: ConversationSession) -> Answered:
        """
        The user declined to pick a candidate; drop the pending correction.

        Args:
            session: Conversation session

        Returns:
            An apology answer
        """
        async with session.lock:
            session.touch()
            session.answer(DECLINE_MESSAGE)
            return Answered(answer=DECLINE_MESSAGE, score=0.0, intent_id="")

    async def select_intent(self, session: ConversationSession, intent_id: str) -> Answered:
        """
        Answer a quick suggestion picked directly by the user. Nothing is learned.

        Args:
            session: Conversation session
            intent_id: Suggested intent picked by the user

        Returns:
            The intent's canned answer

        Raises:
            NotFoundException: If the intent is not in the catalog
        """
        intent = self.catalog.get(intent_id)
        if intent is None:
            raise NotFoundException("Intent", intent_id)

        async with session.lock:
            session.touch()
            session.transcript.add_user(intent.title)
            session.transcript.begin_processing()
            session.answer(intent.response)
            return Answered(answer=intent.response, score=1.0, intent_id=intent.id)

    def _answer_for(self, result: ClassificationResult) -> str:
        if result.answer:
            return result.answer
        intent = self.catalog.get(result.intent_id)
        if intent and intent.response:
            return intent.response
        return APOLOGY_MESSAGE

    async def _candidates(self, utterance: str) -> List[Candidate]:
        try:
            matches = await asyncio.to_thread(self.catalog.search, utterance)
        except Exception as e:
            self.logger.error(f"Lexical search failed: {str(e)}", exc_info=True)
            return []
        return [Candidate.from_intent(intent) for intent in matches[:MAX_CANDIDATES]]
