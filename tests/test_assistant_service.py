import os
from datetime import datetime, timedelta

import pytest

from support_assistant.config import Settings
from support_assistant.domain.interfaces.repository_interface import IntentStoreInterface
from support_assistant.domain.models.conversation import TurnState
from support_assistant.domain.models.message import MessageRole, Transcript
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.domain.services.session_service import WELCOME_MESSAGE, SessionStore
from support_assistant.infrastructure.repositories.intent_repository import JsonFileIntentRepository
from support_assistant.utils.exceptions import ExternalServiceException


class FailingStore(IntentStoreInterface):
    async def list_intents(self):
        raise ExternalServiceException(service_name="intent_store", message="catalog down")


async def test_startup_trains_and_loads_catalog(assistant, sample_intents):
    status = assistant.status()

    assert status["started"]
    assert status["classifier_ready"]
    assert status["intents"] == len(sample_intents)
    assert status["training_examples"] == sum(len(i.examples) for i in sample_intents)
    assert status["model_generation"] == 1


async def test_refresh_keeps_learned_corrections(assistant, intent_store, sample_intents):
    assistant.learner.learn("me cobraron dos veces", "billing_issue")

    intent_store.replace(sample_intents[:3])
    result = await assistant.refresh_catalog()

    assert result["num_intents"] == 3
    assert len(assistant.catalog) == 3
    assert assistant.catalog.get("plan_change") is None
    assert assistant.classifier.classify("me cobraron dos veces").intent_id == "billing_issue"


async def test_failed_refresh_keeps_previous_catalog_and_model(assistant, sample_intents):
    generation = assistant.classifier.generation
    index = assistant.catalog.index
    assistant.intent_store = FailingStore()

    with pytest.raises(ExternalServiceException):
        await assistant.refresh_catalog()

    assert assistant.catalog.index is index
    assert assistant.classifier.generation == generation
    assert len(assistant.catalog) == len(sample_intents)


async def test_shutdown_exports_model_and_drops_sessions(intent_store, tmp_path):
    export_path = str(tmp_path / "intent_model.joblib")
    service = AssistantService(intent_store=intent_store, model_export_path=export_path)
    await service.startup()
    service.sessions.get_or_create("abc")

    await service.shutdown()

    assert os.path.exists(export_path)
    assert len(service.sessions) == 0
    assert not service.started


def test_from_settings_uses_configured_store(tmp_path):
    settings = Settings(
        INTENT_STORE_TYPE="file",
        INTENT_CATALOG_PATH=str(tmp_path / "intents.json"),
        SEARCH_THRESHOLD=0.2,
        SESSION_TTL_SECONDS=60
    )

    service = AssistantService.from_settings(settings)

    assert isinstance(service.intent_store, JsonFileIntentRepository)
    assert service.intent_store.path == str(tmp_path / "intents.json")
    assert service.catalog.threshold == 0.2
    assert service.sessions.ttl_seconds == 60


def test_session_store_creates_once_with_welcome_message():
    store = SessionStore(ttl_seconds=0)

    session = store.get_or_create("s1")

    assert store.get_or_create("s1") is session
    assert session.transcript.last.text == WELCOME_MESSAGE
    assert session.state == TurnState.IDLE
    assert len(store) == 1
    assert store.remove("s1")
    assert store.get("s1") is None


def test_session_store_evicts_idle_sessions():
    store = SessionStore(ttl_seconds=60)
    stale = store.get_or_create("stale")
    stale.last_activity = datetime.utcnow() - timedelta(seconds=120)
    store.get_or_create("fresh")

    assert store.get("stale") is None
    assert store.get("fresh") is not None


def test_transcript_placeholder_is_replaced():
    transcript = Transcript()
    transcript.add_user("no tengo internet")
    transcript.begin_processing()

    assert transcript.last.is_placeholder

    transcript.complete("Reinicia el módem.")

    assert [(m.role, m.text) for m in transcript] == [
        (MessageRole.USER, "no tengo internet"),
        (MessageRole.BOT, "Reinicia el módem."),
    ]


def test_transcript_complete_without_placeholder_appends():
    transcript = Transcript()
    transcript.add_bot("Hola")

    transcript.complete("¿En qué puedo ayudarte?")

    assert len(transcript) == 2
