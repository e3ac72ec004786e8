"""
Composition root of the support assistant.

AssistantService owns the process-wide classifier, the intent catalog, the
session store and the services built on them. Lifecycle:

1. construct once at process start (``from_settings``),
2. ``startup()`` loads the catalog and trains the classifier,
3. ``refresh_catalog()`` reloads on demand; learned corrections survive,
4. ``shutdown()`` drops sessions (and exports the model when configured).

Nothing is persisted: a restart reverts to the seed-trained state.
"""

from typing import Any, Dict, Optional
import asyncio

from support_assistant.config import Settings
from support_assistant.domain.interfaces.repository_interface import IntentStoreInterface
from support_assistant.domain.services.catalog_service import IntentCatalog
from support_assistant.domain.services.learning_service import OnlineLearningCoordinator
from support_assistant.domain.services.resolution_service import ResolutionOrchestrator
from support_assistant.domain.services.session_service import SessionStore
from support_assistant.infrastructure.ai.intent.intent_classifier import IntentClassifier
from support_assistant.infrastructure.ai.intent.variations import VariationExpander
from support_assistant.infrastructure.repositories.intent_repository import create_intent_store
from support_assistant.utils.logger import get_logger


class AssistantService:
    """Explicitly constructed service object passed to request handlers."""

    def __init__(
        self,
        intent_store: IntentStoreInterface,
        classifier: Optional[IntentClassifier] = None,
        catalog: Optional[IntentCatalog] = None,
        sessions: Optional[SessionStore] = None,
        model_export_path: Optional[str] = None
    ):
        """
        Initialize the assistant with its collaborators.

        Args:
            intent_store: Source of intent catalog snapshots
            classifier: Shared intent classifier
            catalog: Atomically swappable catalog and lexical index
            sessions: Session store
            model_export_path: Where to dump the model on shutdown
        """
        self.intent_store = intent_store
        self.classifier = classifier or IntentClassifier()
        self.catalog = catalog or IntentCatalog()
        self.sessions = sessions or SessionStore()
        self.learner = OnlineLearningCoordinator(self.classifier, VariationExpander())
        self.orchestrator = ResolutionOrchestrator(self.classifier, self.catalog, self.learner)
        self.model_export_path = model_export_path
        self._refresh_lock = asyncio.Lock()
        self.started = False
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssistantService":
        """
        Build the assistant from application settings.

        Args:
            settings: Application settings

        Returns:
            An assistant that still needs ``startup()``
        """
        intent_store = create_intent_store(
            settings.INTENT_STORE_TYPE,
            catalog_path=settings.INTENT_CATALOG_PATH,
            url=settings.INTENT_STORE_URL,
            timeout=settings.INTENT_STORE_TIMEOUT
        )
        return cls(
            intent_store=intent_store,
            classifier=IntentClassifier({"regularization": settings.CLASSIFIER_REGULARIZATION}),
            catalog=IntentCatalog(settings.SEARCH_THRESHOLD, settings.SEARCH_MIN_MATCH_LENGTH),
            sessions=SessionStore(ttl_seconds=settings.SESSION_TTL_SECONDS),
            model_export_path=settings.MODEL_EXPORT_PATH
        )

    async def startup(self) -> Dict[str, Any]:
        """Load the catalog and train the classifier for the first time."""
        stats = await self.refresh_catalog()
        self.started = True
        self.logger.info("Support assistant started", extra=stats)
        return stats

    async def refresh_catalog(self) -> Dict[str, Any]:
        """
        Reload the intent catalog, retrain and swap in the new lexical index.

        The index is only replaced once training has succeeded, so a failed
        refresh leaves the previous catalog and model active.

        Returns:
            Dictionary containing training results and catalog size

        Raises:
            ExternalServiceException: If the intent store is unreachable
            TrainingFailureError: If retraining fails
        """
        async with self._refresh_lock:
            intents = await self.intent_store.list_intents()
            result = await asyncio.to_thread(self.classifier.bootstrap, intents)
            self.catalog.replace(intents)
            return {**result, "num_intents": len(intents)}

    async def shutdown(self) -> None:
        if self.model_export_path and self.classifier.is_ready:
            try:
                await asyncio.to_thread(self.classifier.export, self.model_export_path)
            except Exception as e:
                self.logger.error(f"Failed to export intent model: {str(e)}", exc_info=True)
        self.sessions.clear()
        self.started = False
        self.logger.info("Support assistant stopped")

    def status(self) -> Dict[str, Any]:
        return {
            "started": self.started,
            "classifier_ready": self.classifier.is_ready,
            "model_generation": self.classifier.generation,
            "training_examples": len(self.classifier.training_examples),
            "intents": len(self.catalog),
            "active_sessions": len(self.sessions)
        }
