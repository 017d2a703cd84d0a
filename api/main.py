"""Main FastAPI application instance."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.config import get_settings
from api.routers import health, parse
from core.exceptions import FountainException, IndexMapInconsistencyError
from core.models import ErrorDetail, ErrorResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info(
        "Starting Fountain parser API v0.1.0 in %s environment (nesting policy: %s)",
        settings.env,
        settings.nesting_policy.value,
    )
    yield
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Fountain Parser API",
    description="Fountain screenplay parsing with Note and Boneyard range resolution",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


# Exception handlers
@app.exception_handler(IndexMapInconsistencyError)
async def index_map_exception_handler(
    request: Request, exc: IndexMapInconsistencyError
) -> JSONResponse:
    """Stripper defects are server errors, never client errors."""
    logger.error("Index map inconsistency: %s %s", exc.message, exc.details)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="InternalServerError",
            message="An unexpected error occurred",
            request_id=request.headers.get("X-Request-ID"),
        ).model_dump(mode="json"),
    )


@app.exception_handler(FountainException)
async def fountain_exception_handler(request: Request, exc: FountainException) -> JSONResponse:
    """Handle parser exceptions."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error=exc.__class__.__name__,
            message=exc.message,
            details=[
                ErrorDetail(field=key, message=str(value)) for key, value in exc.details.items()
            ],
            request_id=request.headers.get("X-Request-ID"),
        ).model_dump(mode="json"),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors."""
    details = [
        ErrorDetail(
            field=".".join(str(loc) for loc in err["loc"]),
            message=err["msg"],
            error_code=err["type"],
        )
        for err in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            message="Request validation failed",
            details=details,
            request_id=request.headers.get("X-Request-ID"),
        ).model_dump(mode="json"),
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(parse.router, prefix="/v1/parse", tags=["Parse"])
