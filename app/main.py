"""DevChecklist.AI API - Main Application Module.

This module initializes the FastAPI application with configuration,
middleware, error handling, routing, and lifecycle management for the
checklist service.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import LogFormatEnum, settings
from app.database import engine
from app.exceptions.base import BaseAppException
from app.schemas.base import HealthResponse
from models import Base

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def build_json_formatter() -> logging.Formatter:
    """Render stdlib log records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def setup_logging():
    """Configure the root logger from settings."""
    handler = logging.StreamHandler()
    if settings.log_format == LogFormatEnum.json:
        handler.setFormatter(build_json_formatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
    logging.basicConfig(level=settings.log_level.value, handlers=[handler], force=True)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_body(request: Request, message: str, error_code: str, details=None) -> dict:
    return {
        "status": "error",
        "message": message,
        "error_code": error_code,
        "details": details,
        "timestamp": _utcnow(),
        "request_id": getattr(request.state, "request_id", None),
    }


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    setup_logging()
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})")

    # Development mode creates tables on start; other environments manage the schema externally
    if settings.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

    if not settings.has_todoist_enabled:
        logger.warning("TODOIST_API_KEY is not set; task endpoints will fail")
    if not settings.has_ai_enabled:
        logger.warning("GOOGLE_API_KEY is not set; code checks will fail")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Checks code against exam requirements and files the checklist in Todoist",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware; also the last stop for errors no handler claimed
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            response = JSONResponse(
                status_code=500,
                content=_error_body(request, INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR"),
            )
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if not isinstance(exc, BaseAppException) and exc.status_code in (404, 405):
            # Raised by the router itself: no route matched the request
            path = request.url.path
            if request.url.query:
                path = f"{path}?{request.url.query}"
            return JSONResponse(
                status_code=404,
                content={"error": "Not Found", "message": f"Route {path} not found"},
            )

        if isinstance(exc, BaseAppException):
            if exc.public:
                message, error_code, details = exc.message, exc.error_code, exc.details or None
            else:
                logger.error(f"{type(exc).__name__}: {exc.message}")
                message, error_code, details = INTERNAL_ERROR_MESSAGE, exc.error_code, None
        elif isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, message, error_code, details),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        message = errors[0]["msg"] if errors else "Validation error"
        return JSONResponse(
            status_code=400,
            content=_error_body(request, message, "VALIDATION_ERROR", errors),
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.domains.codecheck.controller import router as codecheck_router
    from app.domains.todoist.controller import router as todoist_router
    from app.domains.user.controller import router as user_router

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Liveness probe."""
        return HealthResponse(
            status="OK",
            message="DevChecklist.AI API is running",
            timestamp=datetime.now(timezone.utc),
        )

    app.include_router(user_router)
    app.include_router(todoist_router)
    app.include_router(codecheck_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    if settings.is_testing:
        logger.info("Testing environment; not starting the HTTP server")
        return

    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
