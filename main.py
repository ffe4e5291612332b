from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from typing import Optional
import os
import sys

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import __version__
from app.routers import data
from app.core.config import Settings, get_settings
from app.core.errors import CafeError
from app.core.logging import setup_logging
from app.models.responses import HealthResponse
from app.services.file_store import FileStore


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


# Request size limiting middleware
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_size: int = 10 * 1024 * 1024):  # 10MB default
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return error_response(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request entity too large")
        return await call_next(request)

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown"""
    store: FileStore = app.state.file_store
    logger.info("Starting Bonparte Cafe API server...")

    store.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Data directory: {store.data_dir}")

    missing = store.missing_documents()
    if missing:
        logger.warning(f"Missing data files (will be served as null): {', '.join(missing)}")
    else:
        logger.info("All data files are present")

    yield

    logger.info("Shutting down Bonparte Cafe API server...")


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(CafeError)
    async def cafe_error_handler(request, exc: CafeError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "API endpoint not found"
        return error_response(exc.status_code, str(message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return error_response(status.HTTP_400_BAD_REQUEST, f"Invalid request body: {detail}")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request, exc: Exception):
        logger.error(f"Server error: {str(exc)}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Create FastAPI app with lifespan
    app = FastAPI(
        title="Bonparte Cafe API",
        description="File-backed content API for the Bonparte Cafe website and admin panel",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.file_store = FileStore(settings.data_dir, settings.backup_dir)

    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)

    # No authentication, so any origin may call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(data.router, prefix="/api", tags=["Data"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Welcome to the Bonparte Cafe API",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint for monitoring"""
        return HealthResponse(status="OK", message="Cafe API is running")

    return app


# This is important - it needs to be at module level for uvicorn to find it
app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.reload
    )
