import pytest
from fastapi.testclient import TestClient

from support_assistant.api.routers.health import check_assistant_health
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.domain.services.resolution_service import DECLINE_MESSAGE
from support_assistant.domain.services.session_service import WELCOME_MESSAGE
from support_assistant.infrastructure.ai.intent.greetings import GREETING_ANSWER
from support_assistant.infrastructure.repositories.intent_repository import InMemoryIntentRepository
from support_assistant.main import create_application

CHAT = "/api/v1/chat"
ADMIN = "/api/v1/admin"


@pytest.fixture
def client(intent_store):
    app = create_application(AssistantService(intent_store=intent_store))
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_detailed_health(client):
    body = client.get("/health/detailed").json()

    assert body["status"] == "ok"
    assert body["assistant"]["classifier_ready"]
    assert body["assistant"]["intents"] == 5


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers


def test_greeting_message(client):
    response = client.post(f"{CHAT}/sessions/s1/messages", json={"message": "hola"})

    assert response.status_code == 200
    body = response.json()
    assert body["ambiguous"] is False
    assert body["answer"] == GREETING_ANSWER


def test_known_message_is_answered(client):
    body = client.post(f"{CHAT}/sessions/s1/messages", json={"message": "no tengo internet"}).json()

    assert body["ambiguous"] is False
    assert body["intent_id"] == "internet_outage"
    assert body["answer"] == "Reinicia el módem desconectándolo 30 segundos."
    assert body["score"] >= 0.5


def test_blank_message_is_rejected(client):
    response = client.post(f"{CHAT}/sessions/s1/messages", json={"message": "   "})

    assert response.status_code == 422
    assert response.json()["details"]["errors"][0]["field"] == "message"


def test_transcript_records_the_turn(client):
    client.post(f"{CHAT}/sessions/s2/messages", json={"message": "no tengo internet"})

    body = client.get(f"{CHAT}/sessions/s2/transcript").json()

    assert body["session_id"] == "s2"
    assert body["state"] == "answered"
    assert body["pending_correction"] is None
    assert [(m["role"], m["text"]) for m in body["messages"]] == [
        ("bot", WELCOME_MESSAGE),
        ("user", "no tengo internet"),
        ("bot", "Reinicia el módem desconectándolo 30 segundos."),
    ]


def test_disambiguation_learns_and_answers(client):
    response = client.post(
        f"{CHAT}/sessions/s3/disambiguation",
        json={"intent_id": "billing_issue", "message": "no puedo pagar mi factura"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "answer": "Revisa el detalle de tu factura en el portal de clientes.",
        "intent_id": "billing_issue",
        "learned": True,
    }

    body = client.post(f"{CHAT}/sessions/s3/messages", json={"message": "no puedo pagar mi factura"}).json()
    assert body["intent_id"] == "billing_issue"


def test_decline(client):
    body = client.post(f"{CHAT}/sessions/s4/decline").json()

    assert body["answer"] == DECLINE_MESSAGE


def test_selection(client):
    body = client.post(f"{CHAT}/sessions/s5/selection", json={"intent_id": "plan_change"}).json()

    assert body["answer"] == "Cambia tu plan desde Mi cuenta > Planes."
    assert body["score"] == 1.0


def test_selection_of_unknown_intent_is_not_found(client):
    response = client.post(f"{CHAT}/sessions/s5/selection", json={"intent_id": "missing"})

    assert response.status_code == 404
    assert response.json()["details"]["resource_id"] == "missing"


def test_suggestions(client):
    body = client.get(f"{CHAT}/suggestions").json()
    assert len(body["items"]) == 4
    assert body["has_more"] is True

    body = client.get(f"{CHAT}/suggestions", params={"q": "factura", "limit": 2}).json()
    assert body["items"][0]["id"] == "billing_issue"


def test_admin_learn(client):
    response = client.post(
        f"{ADMIN}/learn",
        json={"message": "quiero portar mi número", "intent_id": "number_porting"}
    )

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Aprendizaje completado"
    assert len(body["variants"]) == 7
    assert body["generation"] == 2


def test_admin_catalog_refresh(client):
    body = client.post(f"{ADMIN}/catalog/refresh").json()

    assert body["num_intents"] == 5
    assert body["num_classes"] == 5
    assert body["generation"] == 2


def test_requests_before_startup_are_unavailable(intent_store):
    app = create_application(AssistantService(intent_store=intent_store))
    client = TestClient(app)

    response = client.post(f"{CHAT}/sessions/s1/messages", json={"message": "hola"})

    assert response.status_code == 503


async def test_health_reports_degraded_for_empty_catalog():
    service = AssistantService(intent_store=InMemoryIntentRepository([]))
    await service.startup()

    assert check_assistant_health(service)["status"] == "degraded"
    assert check_assistant_health(None)["status"] == "error"
