"""FastAPI application factory"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from wealthease.api.middleware import MetricsMiddleware, RequestIDMiddleware
from wealthease.api.routes import analysis, chatbot, transactions
from wealthease.config import Settings, settings
from wealthease.domain.exceptions import DomainException, ServiceError
from wealthease.infrastructure.observability.logging import setup_logging
from wealthease.infrastructure.rate_limit import FixedWindowRateLimiter
from wealthease.infrastructure.store import TransactionStore

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def _error_response(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content = {"success": False, "error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid request data: {location}: {first.get('msg', 'invalid value')}" if location else "Invalid request data"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {success: false, error}"""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        details = None
        if isinstance(exc, ServiceError) and not request.app.state.settings.is_production:
            details = exc.details
        return _error_response(exc.status_code, str(exc), details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, _describe_validation_error(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logging.error(
            f"Unhandled error: {exc}",
            extra={"request_id": getattr(request.state, "request_id", "unknown")},
        )
        details = None if request.app.state.settings.is_production else str(exc)
        return _error_response(500, "Internal server error", details)


def create_app(
    app_settings: Settings | None = None,
    store: TransactionStore | None = None,
) -> FastAPI:
    """Create and configure FastAPI application"""
    app_settings = app_settings or settings

    app = FastAPI(
        title="WealthEase Insights",
        description="Transaction analysis, balance forecasts and chatbot transaction extraction",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Process-lifetime state, injected into handlers through dependencies
    app.state.settings = app_settings
    app.state.store = store or TransactionStore()
    app.state.rate_limiters = {
        "analysis": FixedWindowRateLimiter(
            "analysis",
            app_settings.analysis_rate_limit,
            app_settings.analysis_rate_window_seconds,
        ),
        "chatbot": FixedWindowRateLimiter(
            "chatbot",
            app_settings.chatbot_rate_limit,
            app_settings.chatbot_rate_window_seconds,
        ),
    }

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(analysis.router, prefix="/api/ai", tags=["analysis"])
    app.include_router(chatbot.router, prefix="/api/ai", tags=["chatbot"])
    app.include_router(transactions.router, prefix="/api/users", tags=["transactions"])

    logging.info(
        "Application created",
        extra={"step": "startup", "openai_configured": app_settings.openai_configured},
    )
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured port"""
    uvicorn.run("wealthease.api.main:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
