"""
Main FastAPI application entry point for the Thumbnail Service.
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from thumbnail_service.api.routes import api_router
from thumbnail_service.core.exceptions import (
    BlobNotFoundError,
    ImageValidationError,
    InvalidEventError,
    InvalidMimeTypeError,
    MalformedBlobPathError,
    StorageError,
    ThumbnailServiceException,
)
from thumbnail_service.core.logging import logger
from thumbnail_service.config import get_settings, get_thumbnail_config
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService
from thumbnail_service.services.storage.storage_service import StorageService

# Initialize settings
settings = get_settings()

# Status codes for domain errors, most specific first
ERROR_STATUS_CODES = [
    (MalformedBlobPathError, status.HTTP_400_BAD_REQUEST),
    (InvalidEventError, status.HTTP_400_BAD_REQUEST),
    (InvalidMimeTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (ImageValidationError, 422),
    (BlobNotFoundError, status.HTTP_404_NOT_FOUND),
    (StorageError, status.HTTP_502_BAD_GATEWAY),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared services at startup and release the storage client at shutdown."""
    try:
        thumbnail_config = get_thumbnail_config()
    except ValidationError as e:
        logger.error(f"Failed to configure thumbnail generation: {str(e)}")
        raise

    storage_service = StorageService()
    app.state.storage_service = storage_service
    app.state.image_processing_service = ImageProcessingService(thumbnail_config, storage_service)
    logger.info(f"{settings.PROJECT_NAME} started")

    try:
        yield
    finally:
        await storage_service.close()


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Event-driven thumbnail generation for uploaded images",
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)


# Add request processing time middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "documentation": f"{settings.API_V1_STR}/docs"
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION
    }


# Error handling
@app.exception_handler(ThumbnailServiceException)
async def thumbnail_service_exception_handler(request: Request, exc: ThumbnailServiceException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            status_code = code
            break

    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again later."}
    )


# Run the application using Uvicorn if executed directly
if __name__ == "__main__":
    uvicorn.run("thumbnail_service.main:app", host="0.0.0.0", port=8000, reload=settings.DEV_MODE)
