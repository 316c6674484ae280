"""Songlist Resolver - Backend API

A FastAPI backend that turns QQ Music playlist links into plain
"Title - Artist" song lists.

Main Components:
    - FastAPI application with CORS middleware
    - Song list resolution endpoint
    - QQ Music legacy and paginated API integration

License: MIT
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from logging.handlers import TimedRotatingFileHandler
from contextlib import asynccontextmanager
from datetime import datetime
from zoneinfo import ZoneInfo
from pathlib import Path

from songlist import __version__
from songlist.config import settings
from songlist.models.schemas import ErrorResponse
from songlist.routes import songlist

# Custom logging formatter with timezone support
class TimezoneFormatter(logging.Formatter):
    def __init__(self, fmt=None, datefmt=None, tz=None):
        super().__init__(fmt, datefmt)
        self.tz = ZoneInfo(tz) if tz else None

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Configure logging
handler = logging.StreamHandler()
handler.setFormatter(TimezoneFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT, tz=settings.log_timezone))

# File logging
handlers = [handler]
if settings.log_file_enabled:
    try:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / "songlist.log",
            when="midnight",
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(TimezoneFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT, tz=settings.log_timezone))
        handlers.append(file_handler)
    except (PermissionError, OSError) as e:
        # Fall back to console-only logging if file logging fails
        logging.warning(f"Failed to set up file logging: {e}. Using console only.")

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=handlers
)

logger = logging.getLogger(__name__)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifespan Manager

    Logs startup and shutdown.
    """
    logger.info("Starting Songlist Resolver API")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Backend URL: {settings.backend_url}")
    logger.info(f"QQ Music platforms: {', '.join(settings.qqmusic_platforms)}")

    yield

    logger.info("Shutting down Songlist Resolver API")


# Create FastAPI application
app = FastAPI(
    title="Songlist Resolver API",
    description="Backend API that turns QQ Music playlist links into song lists",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(songlist.router)


@app.get("/")
async def root():
    """
    Root Endpoint

    Returns basic API information and status.

    Returns:
        dict: API information
    """
    return {
        "name": "Songlist Resolver API",
        "version": __version__,
        "status": "running",
        "docs": f"{settings.backend_url}/docs" if settings.is_development else "disabled",
        "environment": settings.environment
    }


@app.get("/health")
async def health_check():
    """
    Health Check Endpoint

    Simple health check for monitoring and load balancers.

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "environment": settings.environment
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Global Exception Handler

    Catches unhandled exceptions and returns a formatted error response.

    Args:
        request: FastAPI request object
        exc: Exception that was raised

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            detail=str(exc) if settings.is_development else None
        ).model_dump()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "songlist.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower()
    )
