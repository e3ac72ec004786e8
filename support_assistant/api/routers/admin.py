import asyncio

from fastapi import APIRouter, Depends, status

from support_assistant.api.dependencies import get_assistant, get_request_logger_dependency
from support_assistant.domain.schemas.chat import (
    CatalogRefreshResponse,
    LearnRequest,
    LearnResponse,
)
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.utils.logger import LoggerAdapter


router = APIRouter()


@router.post(
    "/learn",
    response_model=LearnResponse,
    status_code=status.HTTP_200_OK,
    summary="Teach the classifier one utterance"
)
async def learn(
    payload: LearnRequest,
    assistant: AssistantService = Depends(get_assistant),
    logger: LoggerAdapter = Depends(get_request_logger_dependency)
) -> LearnResponse:
    """
    Learn one confirmed (utterance, intent) pair and retrain.

    Args:
        payload: Utterance and intent
        assistant: Process-wide assistant
        logger: Request logger

    Returns:
        LearnResponse: Training summary
    """
    logger.info("Admin learning request", extra={"intent_id": payload.intent_id})

    result = await asyncio.to_thread(assistant.learner.learn, payload.message, payload.intent_id)
    return LearnResponse(
        intent_id=payload.intent_id,
        generation=result["generation"],
        variants=result["variants"]
    )


@router.post(
    "/catalog/refresh",
    response_model=CatalogRefreshResponse,
    status_code=status.HTTP_200_OK,
    summary="Reload the intent catalog and retrain"
)
async def refresh_catalog(
    assistant: AssistantService = Depends(get_assistant),
    logger: LoggerAdapter = Depends(get_request_logger_dependency)
) -> CatalogRefreshResponse:
    logger.info("Refreshing intent catalog")

    result = await assistant.refresh_catalog()
    return CatalogRefreshResponse(
        num_intents=result["num_intents"],
        num_samples=result["num_samples"],
        num_classes=result["num_classes"],
        generation=result["generation"]
    )
