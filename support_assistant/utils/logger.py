import json
import logging
import sys
from typing import Dict, Any, Optional
import uuid

from support_assistant.config import get_settings

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

# Chatty libraries kept at WARNING whatever LOG_LEVEL says
_QUIET_LOGGERS = ("uvicorn.access", "uvicorn.error", "fastapi", "httpx")


class CustomJsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Every key passed through ``extra=`` (correlation_id, session_id, intent_id,
    score, ...) is copied to the top level of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        settings = get_settings()
        log_object = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "service": settings.SERVICE_NAME,
            "environment": settings.ENVIRONMENT,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_object[key] = value

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install the JSON handler on the root logger.

    Args:
        level: Log level name; defaults to the LOG_LEVEL setting
    """
    log_level = getattr(logging, (level or get_settings().LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter())
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger bound to one request: every record carries its correlation id,
    plus the chat session id when the request targets a session.
    """

    def __init__(self, logger: logging.Logger, correlation_id: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(logger, {**(extra or {}), "correlation_id": self.correlation_id})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def get_request_logger(name: str, correlation_id: Optional[str] = None, session_id: Optional[str] = None) -> LoggerAdapter:
    """
    Get a logger configured with request context.

    Args:
        name: Logger name
        correlation_id: Request correlation ID; generated when missing
        session_id: Chat session identifier, when the request targets one

    Returns:
        LoggerAdapter: Configured logger adapter
    """
    extra = {"session_id": session_id} if session_id else {}
    return LoggerAdapter(get_logger(name), correlation_id, extra)
