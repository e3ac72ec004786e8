import os

# ----------------------------------------------------------------------
# Environment MUST be set before any application imports happen
# ----------------------------------------------------------------------

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("INTENT_STORE_TYPE", "file")
os.environ.setdefault("SESSION_TTL_SECONDS", "0")

from typing import List  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from support_assistant.domain.models.conversation import ConversationSession  # noqa: E402
from support_assistant.domain.models.intent import Intent  # noqa: E402
from support_assistant.domain.services.assistant_service import AssistantService  # noqa: E402
from support_assistant.domain.services.catalog_service import IntentCatalog  # noqa: E402
from support_assistant.infrastructure.ai.intent.intent_classifier import IntentClassifier  # noqa: E402
from support_assistant.infrastructure.repositories.intent_repository import InMemoryIntentRepository  # noqa: E402


SAMPLE_INTENTS = [
    Intent(
        id="billing_issue",
        title="Problemas con la factura",
        description="Consultas sobre cobros, pagos y facturación",
        examples=(
            "tengo un cobro indebido en mi factura",
            "mi factura llegó más alta de lo normal",
            "quiero revisar los cargos de mi factura",
        ),
        response="Revisa el detalle de tu factura en el portal de clientes."
    ),
    Intent(
        id="service_activation",
        title="Activación de servicio",
        description="Alta y aprovisionamiento de servicios",
        examples=(
            "quiero activar un servicio nuevo",
            "cómo activo mi línea",
            "el servicio contratado aún no está activo",
        ),
        response="Ingresa al módulo de Aprovisionamiento y selecciona el plan contratado."
    ),
    Intent(
        id="internet_outage",
        title="Falla de internet",
        description="Caídas o lentitud de la conexión",
        examples=(
            "no tengo internet",
            "el internet está muy lento",
            "se cae la conexión constantemente",
        ),
        response="Reinicia el módem desconectándolo 30 segundos."
    ),
    Intent(
        id="password_reset",
        title="Restablecer contraseña",
        description="Recuperar el acceso a la cuenta",
        examples=(
            "olvidé mi contraseña",
            "no puedo iniciar sesión en el portal",
            "quiero cambiar mi clave",
        ),
        response="Usa la opción ¿Olvidaste tu contraseña? en la pantalla de inicio."
    ),
    Intent(
        id="plan_change",
        title="Cambio de plan",
        description="Mejorar o reducir el plan contratado",
        examples=(
            "quiero cambiar mi plan",
            "cómo mejoro mi plan de datos",
            "deseo bajar de plan",
        ),
        response="Cambia tu plan desde Mi cuenta > Planes."
    ),
]


@pytest.fixture
def sample_intents() -> List[Intent]:
    return list(SAMPLE_INTENTS)


@pytest.fixture
def classifier() -> IntentClassifier:
    return IntentClassifier()


@pytest.fixture
def trained_classifier(sample_intents) -> IntentClassifier:
    classifier = IntentClassifier()
    classifier.bootstrap(sample_intents)
    return classifier


@pytest.fixture
def catalog(sample_intents) -> IntentCatalog:
    catalog = IntentCatalog()
    catalog.replace(sample_intents)
    return catalog


@pytest.fixture
def session() -> ConversationSession:
    return ConversationSession("test-session")


@pytest.fixture
def intent_store(sample_intents) -> InMemoryIntentRepository:
    return InMemoryIntentRepository(sample_intents)


@pytest_asyncio.fixture
async def assistant(intent_store) -> AssistantService:
    service = AssistantService(intent_store=intent_store)
    await service.startup()
    yield service
    await service.shutdown()
