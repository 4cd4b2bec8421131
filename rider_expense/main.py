"""
Rider Expense - earnings and expense tracker backend for delivery riders

Main FastAPI application entry point. Configures logging, error handling,
routes and application lifecycle events.
"""

import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from rider_expense import __version__
from rider_expense.config import get_settings
from rider_expense.db import init_db
from rider_expense.errors import AppError
from rider_expense.logging_config import get_logger, setup_logging
from rider_expense.responses import failure, success

# Import route modules
from rider_expense.routes import auth, daily, profile

settings = get_settings()
setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

# Get logger for this module
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Handles startup and shutdown events for the application.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Rider Expense Application Starting")
    logger.info(f"Version: {app.version} ({settings.ENVIRONMENT})")
    logger.info("=" * 60)
    init_db()

    yield  # Application runs here

    # Shutdown
    logger.info("Rider Expense Application Shutting Down")
    logger.info("=" * 60)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: log unexpected errors and answer with the JSON envelope."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled error on {request.method} {request.url.path}\n{traceback.format_exc()}")
            return failure("Internal server error", status_code=500, error=str(exc))


# Create FastAPI application instance
app = FastAPI(
    title="Rider Expense",
    description="Earnings, expenses and billing-cycle summaries for delivery riders.",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(ErrorLoggingMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
        return failure("Internal server error", status_code=exc.status_code, error=exc.message)
    return failure(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", message)
    return failure(message, status_code=400)


@app.get("/")
def root():
    return success("Backend is live!")


@app.get("/health", response_class=PlainTextResponse, include_in_schema=False)
def health():
    return "ok"


# Include route modules
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(daily.router, prefix="/api/daily", tags=["Daily Records"])

logger.info("All routes registered successfully")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rider_expense.main:app", host="127.0.0.1", port=4000, reload=settings.DEBUG)
