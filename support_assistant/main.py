from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import time
import uuid
from contextlib import asynccontextmanager

from support_assistant.config import get_settings
from support_assistant.domain.services.assistant_service import AssistantService
from support_assistant.utils.logger import configure_logging, get_logger
from support_assistant.utils.exceptions import AppException
from support_assistant.api.routers import admin, chat, health


configure_logging()
logger = get_logger(__name__)
settings = get_settings()


def create_application(assistant: Optional[AssistantService] = None) -> FastAPI:
    """
    Build the FastAPI application around one AssistantService.

    The assistant is trained in the lifespan handler, before the first
    request is served, and exposed to handlers as ``app.state.assistant``.

    Args:
        assistant: Pre-built assistant (tests, embedding); built from
            settings when omitted

    Returns:
        FastAPI: Configured application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service = assistant or AssistantService.from_settings(settings)
        stats = await service.startup()
        app.state.assistant = service
        logger.info(
            f"{settings.SERVICE_NAME} ready with {stats['num_intents']} intents",
            extra={"generation": stats["generation"], "num_samples": stats["num_samples"]}
        )

        yield

        await service.shutdown()
        app.state.assistant = None
        logger.info(f"{settings.SERVICE_NAME} stopped")

    app = FastAPI(
        title="Support Assistant API",
        description="Intent resolution, disambiguation and online learning for the support chat widget",
        version=settings.VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG
    )

    configure_middleware(app)
    register_routers(app)
    configure_exception_handlers(app)

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    CORS for the browser widget, then request timing and correlation ids.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={"correlation_id": correlation_id, "elapsed": elapsed}
        )
        return response


def register_routers(app: FastAPI) -> None:
    app.include_router(health.router, tags=["Health"])
    app.include_router(chat.router, prefix=f"{settings.API_PREFIX}/chat", tags=["Chat"])
    app.include_router(admin.router, prefix=f"{settings.API_PREFIX}/admin", tags=["Admin"])


def _error_response(status_code: int, message: str, details: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": details, "status_code": status_code}
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Render every error as ``{"error", "details", "status_code"}``.

    Args:
        app: FastAPI application instance
    """
    @app.exception_handler(AppException)
    async def handle_app_exception(request: Request, exc: AppException):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"status_code": exc.status_code, "details": exc.details, "path": request.url.path}
        )
        return _error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid request", {"errors": errors})

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {str(exc)}", extra={"path": request.url.path})
        message = str(exc) if settings.DEBUG else "An unexpected error occurred"
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, {})


app = create_application()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "support_assistant.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
