from fastapi import APIRouter, Depends, Request, status
from typing import Dict, Any, Optional
from datetime import datetime

from support_assistant.config import get_settings
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.utils.logger import LoggerAdapter
from support_assistant.api.dependencies import get_request_logger_dependency

router = APIRouter(prefix="/health")


def _service_info() -> Dict[str, Any]:
    settings = get_settings()
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("", status_code=status.HTTP_200_OK, summary="Liveness check")
async def get_health() -> Dict[str, Any]:
    return {"status": "ok", **_service_info()}


@router.get(
    "/detailed",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    response_description="Classifier, catalog and session status"
)
async def get_detailed_health(
    request: Request,
    logger: LoggerAdapter = Depends(get_request_logger_dependency)
) -> Dict[str, Any]:
    """
    Report whether the assistant can answer: the classifier must be trained
    and the catalog should not be empty.

    Args:
        request: Incoming request
        logger: Request logger

    Returns:
        Dict: Overall status with per-component details
    """
    assistant = getattr(request.app.state, "assistant", None)
    components = check_assistant_health(assistant)
    logger.debug("Detailed health check", extra={"health_status": components["status"]})

    return {"status": components["status"], **_service_info(), "assistant": components}


def check_assistant_health(assistant: Optional[AssistantService]) -> Dict[str, Any]:
    """
    Summarize classifier and catalog health.

    ``error`` when nothing can be classified, ``degraded`` when the classifier
    is trained but the catalog is empty (every message gets the apology).
    """
    if assistant is None:
        return {"status": "error", "message": "Assistant not initialized"}

    details = assistant.status()
    if not details["classifier_ready"]:
        overall = "error"
    elif details["intents"] == 0:
        overall = "degraded"
    else:
        overall = "ok"
    return {"status": overall, **details}
