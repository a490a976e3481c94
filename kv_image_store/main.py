import logging
import math
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from config import get_settings
from kv_image_store import handlers, transforms
from kv_image_store.db import init_db
from kv_image_store.dependencies import get_key_value_store
from kv_image_store.errors import ErrorKind, KVError
from kv_image_store.schemas import Payload
from kv_image_store.storage.base import KeyValueStore

# Get settings and configure logging before anything else
settings = get_settings()
settings.configure_logging()

# Create logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Storage backend: {settings.storage_backend}")

    if settings.storage_backend == "database":
        init_db()

    yield

    # Shutdown
    logger.info("Shutting down application")


# Create FastAPI app with settings
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KVError)
async def kv_error_handler(request: Request, exc: KVError) -> PlainTextResponse:
    """Turn a KVError into a plain-text response carrying its message."""
    if exc.kind is ErrorKind.INTERNAL_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc!r}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def _payload_response(payload: Payload) -> Response:
    # The stored content type is sent back verbatim, without an added charset
    return Response(content=payload.body, headers={"content-type": payload.content_type})


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return "<h1>Hello World</h1>"


@app.get("/hello", response_class=HTMLResponse)
def hello(name: Optional[str] = None) -> str:
    """Greet the visitor named in the query string."""
    if name is None:
        return "<h1>Hello Unknown Visitor</h1>"
    return f"<h1>Hello {name}</h1>"


@app.get("/health")
def health_check() -> dict[str, str]:
    """Simple health-check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": settings.app_version,
    }


@app.get("/config")
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
        "storage_backend": settings.storage_backend,
        "thumbnail_width": settings.thumbnail_width,
        "thumbnail_height": settings.thumbnail_height,
        "log_level": settings.log_level,
        "log_json": settings.log_json,
        "max_upload_size": settings.max_upload_size,
    }


@app.post("/kv/{key}", tags=["kv"])
async def post_kv(
    key: str,
    request: Request,
    content_type: Optional[str] = Header(default=None),
    kv_store: KeyValueStore = Depends(get_key_value_store),
) -> PlainTextResponse:
    """Store the raw request body under a key.

    Bodies sent with an ``image/*`` content type are decoded and kept as
    images; anything else is kept verbatim with its content type.

    Args:
        key: Key to write.
        request: Incoming request, read for its raw body.
        content_type: Declared content type of the body.
        kv_store: Backend to write to.

    Returns:
        PlainTextResponse: ``OK`` on success.

    Raises:
        KVError: If the payload is rejected or the store cannot be written.
    """
    data = await request.body()
    # Decoding and locking block, keep them off the event loop
    result = await run_in_threadpool(
        handlers.store, kv_store, key, content_type, data, settings.max_upload_size
    )
    return PlainTextResponse(result)


@app.get("/kv/{key}", tags=["kv"])
def get_kv(
    key: str,
    kv_store: KeyValueStore = Depends(get_key_value_store),
) -> Response:
    """Return the value stored under a key.

    Images come back as PNG regardless of the format they were stored in.
    """
    return _payload_response(handlers.fetch(kv_store, key))


@app.get("/kv/{key}/grayscale", tags=["images"])
def grayscale(
    key: str,
    kv_store: KeyValueStore = Depends(get_key_value_store),
) -> Response:
    """Return the stored image converted to grayscale."""
    payload = handlers.transform(kv_store, key, transforms.grayscale, "grayscale")
    return _payload_response(payload)


@app.get("/kv/{key}/thumbnail", tags=["images"])
def thumbnail(
    key: str,
    kv_store: KeyValueStore = Depends(get_key_value_store),
) -> Response:
    """Return the stored image shrunk to fit the configured thumbnail size."""
    operation = transforms.thumbnail(*settings.thumbnail_size)
    payload = handlers.transform(kv_store, key, operation, "thumbnail")
    return _payload_response(payload)


@app.get("/kv/{key}/blur/{sigma}", tags=["images"])
def blur(
    key: str,
    sigma: float,
    kv_store: KeyValueStore = Depends(get_key_value_store),
) -> Response:
    """Return the stored image with a Gaussian blur of radius ``sigma``."""
    if not math.isfinite(sigma) or sigma < 0:
        raise KVError.bad_request("Blur sigma must be a finite, non-negative number")
    payload = handlers.transform(kv_store, key, transforms.blur(sigma), "blur")
    return _payload_response(payload)
