"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from drive_decision.api.dependencies import get_request_id
from drive_decision.api.middleware import RequestIDMiddleware, MetricsMiddleware
from drive_decision.api.v1 import amortization, decision, explain, history, what_if
from drive_decision.domain.exceptions import InvalidArgumentError
from drive_decision.infrastructure.database.session import init_db
from drive_decision.infrastructure.observability.logging import setup_logging
from drive_decision.infrastructure.observability.metrics import invalid_input_counter
from drive_decision.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    """Engine input rejections become 422s naming the offending field"""
    invalid_input_counter.inc()
    logging.warning(
        f"Invalid input: {exc}",
        extra={"request_id": get_request_id(request), "field": exc.field, "path": request.url.path},
    )
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="DriveDecision",
        description="Deterministic buy-vs-lease recommendations with stress analysis",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "narrator": "enabled" if settings.narrator_enabled else "disabled",
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # /decision/history must be registered before /decision/{decision_id}
    app.include_router(history.router, prefix="/v1", tags=["decisions"])
    app.include_router(decision.router, prefix="/v1", tags=["decisions"])
    app.include_router(explain.router, prefix="/v1", tags=["explanations"])
    app.include_router(what_if.router, prefix="/v1", tags=["what-if"])
    app.include_router(amortization.router, prefix="/v1", tags=["amortization"])

    return app


app = create_app()
