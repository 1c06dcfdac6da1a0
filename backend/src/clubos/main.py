"""
ClubOS - Main FastAPI Application
"""

import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from .config import settings
from .database import init_db
from .exceptions import ClubError, Timeout, UpstreamFailure
from .routes import bookings, chat, events, facilities, webhooks

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant country club backend - facility bookings, events, RSVPs and a member chat assistant",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - " f"Status: {response.status_code} - " f"Time: {process_time:.3f}s"
    )

    return response


@app.exception_handler(ClubError)
async def club_error_handler(request: Request, exc: ClubError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed upstream: {exc.detail}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Invalid input", "errors": errors})


@app.exception_handler(OperationalError)
async def database_error_handler(request: Request, exc: OperationalError):
    message = str(exc.orig) if exc.orig is not None else str(exc)

    if "statement timeout" in message or "canceling statement" in message:
        logger.warning(f"Database statement timed out on {request.url.path}")
        error = Timeout("Database request timed out")
    else:
        logger.error(f"Database unavailable on {request.url.path}: {message}")
        error = UpstreamFailure("Database unavailable")

    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error occurred"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables when a database is configured"""
    logger.info("Starting ClubOS API...")

    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL is not set; skipping database initialization")
        return

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise

    logger.info(f"API started in {settings.ENVIRONMENT} mode")


# Include routers
app.include_router(facilities.router)
app.include_router(bookings.router)
app.include_router(events.router)
app.include_router(chat.router)
app.include_router(webhooks.router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "chat_enabled": settings.chat_enabled,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy", "timestamp": time.time()}


if __name__ == "__main__":
    uvicorn.run(
        "clubos.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
    )
