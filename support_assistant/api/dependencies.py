from typing import Optional
from fastapi import Depends, Header, HTTPException, Path, Request, status
import uuid

from support_assistant.domain.models.conversation import ConversationSession
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.utils.logger import get_request_logger, LoggerAdapter


def get_correlation_id(
    x_correlation_id: Optional[str] = Header(None)
) -> str:
    """
    Extract correlation ID from headers or generate a new one.

    Args:
        x_correlation_id: Correlation ID from request header

    Returns:
        str: Correlation ID
    """
    return x_correlation_id or str(uuid.uuid4())


def get_request_logger_dependency(
    correlation_id: str = Depends(get_correlation_id)
) -> LoggerAdapter:
    """
    Provide a configured logger for the request context.

    Args:
        correlation_id: Request correlation ID

    Returns:
        LoggerAdapter: Configured logger
    """
    return get_request_logger(__name__, correlation_id)


def get_assistant(request: Request) -> AssistantService:
    """
    Provide the assistant attached to the application at startup.

    Args:
        request: Incoming request

    Returns:
        AssistantService: The process-wide assistant

    Raises:
        HTTPException: If the assistant has not been started
    """
    assistant = getattr(request.app.state, "assistant", None)
    if assistant is None or not assistant.started:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Support assistant is not ready"
        )
    return assistant


def get_session(
    session_id: str = Path(..., min_length=1, max_length=128, description="Chat session ID"),
    assistant: AssistantService = Depends(get_assistant)
) -> ConversationSession:
    """
    Provide the conversation session addressed by the request path.

    Args:
        session_id: Session identifier owned by the caller
        assistant: Process-wide assistant

    Returns:
        ConversationSession: Existing or newly created session
    """
    return assistant.sessions.get_or_create(session_id)
