"""
Expensewise API - FastAPI application entry point

A thin transport over CategorizationFlow. It forwards {"name": ...}
and relays the same result shape the in-process call returns.

Run with:
    uvicorn expensewise.api.main:app --reload
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expensewise import __version__
from expensewise.audit import configure_logging
from expensewise.config import get_settings, validate_all_settings
from expensewise.models.expense import CategorizationFailure
from expensewise.orchestrator import CategorizationFlow, create_app_components

logger = structlog.get_logger(__name__)
settings = get_settings()


@lru_cache()
def get_flow() -> CategorizationFlow:
    """Shared categorization flow (overridable in tests)."""
    return create_app_components()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager"""
    configure_logging(settings.app.log_level)
    logger.info("starting_expensewise_api",
                environment=settings.app.app_environment,
                version=__version__,
                services=validate_all_settings())
    yield
    logger.info("shutting_down_expensewise_api")


app = FastAPI(
    title="Expensewise API",
    description="AI-assisted expense categorization",
    version=__version__,
    debug=settings.app.debug_mode,
    lifespan=lifespan,
    docs_url="/docs" if not settings.app.is_production else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins_list,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("categorize_api_error",
                 path=request.url.path,
                 error=str(exc),
                 exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get("/health")
async def health() -> dict:
    """Liveness plus which external services are configured."""
    return {"status": "ok", "services": validate_all_settings()}


@app.post("/api/categorize")
async def categorize(
    request: Request,
    flow: CategorizationFlow = Depends(get_flow),
) -> JSONResponse:
    """
    Categorize a raw expense name.

    Body: {"name": "AMZN*AB123CD456"}

    200: categorization result (camelCase fields)
    400: {"error": ...} for bad input or a failed categorization
    500: {"error": ...} when the server is missing its Gemini key
    """
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Request body must be JSON"},
        )

    name = body.get("name") if isinstance(body, dict) else None
    if not name or not isinstance(name, str):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Expense name is required"},
        )

    outcome = await flow.categorize(name)

    if isinstance(outcome, CategorizationFailure):
        status_code = (
            status.HTTP_500_INTERNAL_SERVER_ERROR
            if outcome.error_type == "ConfigurationError"
            else status.HTTP_400_BAD_REQUEST
        )
        return JSONResponse(status_code=status_code, content=outcome.to_wire())

    return JSONResponse(content=outcome.to_wire())
