"""
FastAPI Main Entry

Podsite - marketing site backend and episode CMS API.
"""
import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from podsite.config import (
    APP_NAME,
    APP_VERSION,
    API_HOST,
    API_PORT,
    CORS_ORIGINS,
    DEBUG,
    FALLBACK_ENABLED,
    LOCAL_STORE_PATH,
    LOG_FILE,
    LOG_LEVEL,
    LOG_RETENTION,
    LOG_ROTATION,
    MEDIA_BASE_URL,
    MEDIA_ROOT,
)
from podsite.exceptions import (
    AuthenticationRequired,
    DuplicateSlugError,
    EpisodeNotFoundError,
    PartialImportFailure,
    PodsiteError,
    StoreError,
    ValidationFailed,
)
from podsite.services.auth_service import create_session_codec
from podsite.services.media_service import LocalBlobStorage, MediaService, UploadTooLarge
from podsite.stores import FallbackReader, LocalEpisodeStore, create_episode_store


# ==================== Logging ====================
def configure_logging() -> None:
    """stderr sink + rotating file sink."""
    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL)
    Path(LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        LOG_FILE,
        level=LOG_LEVEL,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        encoding="utf-8",
    )


# ==================== Create FastAPI App ====================
app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    debug=DEBUG,
    description="""
    Podsite API

    Episode catalog and admin CMS for the podcast marketing site.

    ## Main features
    * **Public catalog**: list, search, featured grid, episode detail
    * **Admin CRUD**: create, replace, delete episodes
    * **Featured list**: toggle up to 6 featured episodes
    * **Import / Export**: portable JSON snapshots, local-to-database migration
    * **Media**: cover image upload with automatic compression
    """,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ==================== Configure CORS ====================
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Import and Register Routers ====================
from podsite.api import admin, auth, episodes

app.include_router(episodes.router, prefix="/api", tags=["episodes"])
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(admin.router, prefix="/api", tags=["admin"])

app.mount(
    MEDIA_BASE_URL.rstrip("/") or "/media",
    StaticFiles(directory=MEDIA_ROOT, check_dir=False),
    name="media",
)


# ==================== Root Endpoint ====================
@app.get("/", tags=["Root"])
async def root():
    """API root"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc",
    }


# ==================== Health Check ====================
@app.get("/health", tags=["Root"])
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "service": APP_NAME,
        "version": APP_VERSION,
    }


# ==================== Global Exception Handlers ====================
def _error_response(status_code: int, exc: PodsiteError, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_type": exc.error_type, **extra},
    )


@app.exception_handler(AuthenticationRequired)
async def authentication_exception_handler(request: Request, exc: AuthenticationRequired):
    """Missing / invalid / expired session"""
    return _error_response(401, exc)


@app.exception_handler(UploadTooLarge)
async def upload_too_large_handler(request: Request, exc: UploadTooLarge):
    """Upload above the size limit"""
    return _error_response(413, exc)


@app.exception_handler(ValidationFailed)
async def validation_exception_handler(request: Request, exc: ValidationFailed):
    """Malformed request"""
    return _error_response(400, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Body, path or query parameters that fail schema validation"""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Request validation failed",
            "error_type": "validation_error",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(EpisodeNotFoundError)
async def not_found_exception_handler(request: Request, exc: EpisodeNotFoundError):
    """Unknown slug"""
    return _error_response(404, exc)


@app.exception_handler(DuplicateSlugError)
async def duplicate_slug_exception_handler(request: Request, exc: DuplicateSlugError):
    """Slug already taken"""
    return _error_response(409, exc)


@app.exception_handler(PartialImportFailure)
async def partial_import_exception_handler(request: Request, exc: PartialImportFailure):
    """Bulk import with some rejected records"""
    return _error_response(207, exc, **exc.result.to_wire())


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Backing store failure"""
    logger.error(f"Store error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Storage error occurred",
            "error_type": exc.error_type,
            "message": exc.message if app.debug else "Internal storage error",
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Unhandled errors"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_type": "internal_error",
            "message": str(exc) if app.debug else "An unexpected error occurred",
        },
    )


# ==================== Startup Event ====================
@app.on_event("startup")
async def startup_event():
    """Build the process-wide collaborators once and hang them on app.state."""
    configure_logging()

    store = create_episode_store()
    local_store = store if isinstance(store, LocalEpisodeStore) else LocalEpisodeStore(LOCAL_STORE_PATH)
    fallback = local_store if FALLBACK_ENABLED and local_store is not store else None

    app.state.store = store
    app.state.local_store = local_store
    app.state.reader = FallbackReader(store, fallback)
    app.state.codec = create_session_codec()
    app.state.media = MediaService(LocalBlobStorage(MEDIA_ROOT, MEDIA_BASE_URL))

    logger.info(f"{APP_NAME} API v{APP_VERSION} listening on http://{API_HOST}:{API_PORT} (docs: /docs)")


# ==================== Run Server (Development) ====================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "podsite.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level="info",
    )
