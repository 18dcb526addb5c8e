"""
Module: main.py
Description: FastAPI application entry point for gmail-subscriber.

Initializes the FastAPI application with all routes, error handlers
and startup hooks. Deployed on Cloud Run behind a Pub/Sub push
subscription pointed at "/".
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gmail_subscriber.config.settings import settings
from gmail_subscriber.handlers.pubsub import router as pubsub_router
from gmail_subscriber.handlers.tokens import router as tokens_router
from gmail_subscriber.models.response import HealthResponse
from gmail_subscriber.utils.firebase import get_firebase_app
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Relays Gmail Pub/Sub push notifications to Firebase Cloud Messaging",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(pubsub_router)
app.include_router(tokens_router)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns basic application health information.
    """
    logger.debug("Health check requested")

    return HealthResponse(
        status="ok",
        message=f"{settings.app_name} is healthy",
        version=settings.app_version,
        environment=settings.stage
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Global HTTP exception handler.

    Covers routing errors raised by Starlette (unknown path, wrong method)
    as well as any fastapi.HTTPException, which subclasses it.
    """
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.status_code,
                "message": exc.detail,
                "type": "http_exception"
            }
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors as 400."""
    logger.warning(
        "Request validation failed",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": 400,
                "message": "Invalid request",
                "type": "validation_error"
            }
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled errors.

    Logs unexpected exceptions and returns generic error responses.
    """
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": 500,
                "message": "Internal server error",
                "type": "internal_error"
            }
        }
    )


@app.on_event("startup")
async def startup_event():
    """Initialize Firebase Admin once for the whole process."""
    logger.info(
        "Starting gmail-subscriber",
        version=settings.app_version,
        stage=settings.stage,
        port=settings.port,
        fixed_recipient=bool(settings.fcm_test_token)
    )

    try:
        get_firebase_app(settings)
    except Exception as e:
        # Requests retry initialization on first use
        logger.error(
            "Firebase Admin init error",
            error=str(e),
            error_type=type(e).__name__
        )


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event handler."""
    logger.info("Shutting down gmail-subscriber")
