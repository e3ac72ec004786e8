from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from support_assistant.config import get_settings
from support_assistant.api.dependencies import (
    get_assistant,
    get_request_logger_dependency,
    get_session,
)
from support_assistant.domain.models.conversation import ConversationSession
from support_assistant.domain.schemas.chat import (
    AmbiguousResponse,
    AnsweredResponse,
    CandidateSchema,
    ConfirmationResponse,
    DisambiguationRequest,
    IntentSummary,
    MessageRequest,
    ResolveResponse,
    SelectionRequest,
    SuggestionResponse,
    TranscriptResponse,
)
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.domain.services.resolution_service import Ambiguous
from support_assistant.utils.logger import LoggerAdapter


router = APIRouter()


@router.post(
    "/sessions/{session_id}/messages",
    response_model=ResolveResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a user message",
    response_description="Answer, or candidate intents to choose from"
)
async def send_message(
    payload: MessageRequest,
    session: ConversationSession = Depends(get_session),
    assistant: AssistantService = Depends(get_assistant),
    logger: LoggerAdapter = Depends(get_request_logger_dependency)
) -> ResolveResponse:
    """
    Resolve a user message within a session.

    Args:
        payload: User message
        session: Conversation session
        assistant: Process-wide assistant
        logger: Request logger

    Returns:
        ResolveResponse: Answered or ambiguous result
    """
    logger.info(f"Resolving message for session {session.session_id}")

    result = await assistant.orchestrator.resolve(session, payload.message)
    if isinstance(result, Ambiguous):
        return AmbiguousResponse(
            candidates=[CandidateSchema(id=c.id, title=c.title) for c in result.candidates]
        )
    return AnsweredResponse(answer=result.answer, score=result.score, intent_id=result.intent_id)


@router.post(
    "/sessions/{session_id}/disambiguation",
    response_model=ConfirmationResponse,
    status_code=status.HTTP_200_OK,
    summary="Choose an intent for an ambiguous message"
)
async def confirm_disambiguation(
    payload: DisambiguationRequest,
    session: ConversationSession = Depends(get_session),
    assistant: AssistantService = Depends(get_assistant),
    logger: LoggerAdapter = Depends(get_request_logger_dependency)
) -> ConfirmationResponse:
    """
    Apply the user's disambiguation choice and learn from it.

    Args:
        payload: Chosen intent and optional fallback utterance
        session: Conversation session
        assistant: Process-wide assistant
        logger: Request logger

    Returns:
        ConfirmationResponse: Chosen intent's answer
    """
    logger.info(
        f"Disambiguation for session {session.session_id}",
        extra={"intent_id": payload.intent_id}
    )

    confirmation = await assistant.orchestrator.confirm_disambiguation(
        session, payload.intent_id, payload.message
    )
    return ConfirmationResponse(
        answer=confirmation.answer,
        intent_id=confirmation.intent_id,
        learned=confirmation.learned
    )


@router.post(
    "/sessions/{session_id}/decline",
    response_model=AnsweredResponse,
    status_code=status.HTTP_200_OK,
    summary="Decline to choose among candidate intents"
)
async def decline_disambiguation(
    session: ConversationSession = Depends(get_session),
    assistant: AssistantService = Depends(get_assistant)
) -> AnsweredResponse:
    result = await assistant.orchestrator.decline_disambiguation(session)
    return AnsweredResponse(answer=result.answer, score=result.score, intent_id=result.intent_id)


@router.post(
    "/sessions/{session_id}/selection",
    response_model=AnsweredResponse,
    status_code=status.HTTP_200_OK,
    summary="Pick a quick suggestion"
)
async def select_intent(
    payload: SelectionRequest,
    session: ConversationSession = Depends(get_session),
    assistant: AssistantService = Depends(get_assistant)
) -> AnsweredResponse:
    result = await assistant.orchestrator.select_intent(session, payload.intent_id)
    return AnsweredResponse(answer=result.answer, score=result.score, intent_id=result.intent_id)


@router.get(
    "/sessions/{session_id}/transcript",
    response_model=TranscriptResponse,
    status_code=status.HTTP_200_OK,
    summary="Get the conversation transcript"
)
async def get_transcript(
    session: ConversationSession = Depends(get_session)
) -> TranscriptResponse:
    return TranscriptResponse(**session.to_dict())


@router.get(
    "/suggestions",
    response_model=SuggestionResponse,
    status_code=status.HTTP_200_OK,
    summary="Quick intent suggestions",
    response_description="Intents matching the current input"
)
async def get_suggestions(
    q: str = Query(default="", max_length=500, description="Current input text"),
    limit: Optional[int] = Query(default=None, ge=1, le=50, description="Maximum number of suggestions"),
    assistant: AssistantService = Depends(get_assistant)
) -> SuggestionResponse:
    """
    Suggest intents for the text typed so far; an empty query lists the catalog.

    Args:
        q: Current input text
        limit: Maximum number of suggestions; SUGGESTION_LIMIT when omitted
        assistant: Process-wide assistant

    Returns:
        SuggestionResponse: Suggested intents
    """
    items, has_more = assistant.catalog.suggest(q, limit or get_settings().SUGGESTION_LIMIT)
    return SuggestionResponse(
        items=[IntentSummary(id=i.id, title=i.title, description=i.description) for i in items],
        has_more=has_more
    )
