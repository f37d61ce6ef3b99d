"""FastAPI application entry point."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.staticfiles import StaticFiles

from . import __version__
from .api import router, ws_router
from .config import Settings, get_settings
from .exceptions import ImageNotFoundException, InfoScreenException, PageNotFoundException
from .logging_config import configure_logging
from .models import ErrorCode, ErrorResponse
from .services import BroadcastHub, ImageStore

logger = logging.getLogger(__name__)

# Front-end pages served outside the static mount
_PAGES = {
    "/admin": "admin.html",
    "/touch": "touch-control.html",
}


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with its status and duration."""

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            '"%s %s" %s %.1fms',
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response


class PublicFiles(StaticFiles):
    """Front-end assets. Unknown paths outside /api get ``index.html``."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or path.split("/", 1)[0] == "api":
                raise
            return await super().get_response("index.html", scope)


def _error_response(status_code: int, message: str, code: ErrorCode) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code.value).model_dump(),
    )


def _page_endpoint(page_path: Path):
    """Endpoint serving a single front-end page."""

    async def serve_page() -> FileResponse:
        if not page_path.is_file():
            raise PageNotFoundException(page_path.name)
        return FileResponse(page_path)

    return serve_page


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application around its own store and hub.

    Args:
        settings: Settings to use, defaults to the cached environment settings.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()
    store = ImageStore(settings)
    hub = BroadcastHub(store.list_images)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan context manager."""
        configure_logging(settings.log_level)
        logger.info("Starting info screen server v%s", __version__)
        store.file_storage.ensure_directories()
        store.load()
        yield
        logger.info("Shutting down info screen server")

    app = FastAPI(
        title="Info Screen API",
        description="Slideshow image catalog with live display and touch-control channels",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.hub = hub
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)

    @app.exception_handler(InfoScreenException)
    async def info_screen_exception_handler(
        request: Request,
        exc: InfoScreenException,
    ) -> JSONResponse:
        """Handle all InfoScreenException subclasses with proper error response."""
        if isinstance(exc, ImageNotFoundException):
            logger.info("Image %s not found", exc.image_id)
        else:
            logger.warning("InfoScreenException: %s (code=%s)", exc.message, exc.error_code.value)
        return _error_response(exc.status_code, exc.message, exc.error_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report malformed bodies and parameters as invalid input."""
        message = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        logger.warning("Invalid request %s %s: %s", request.method, request.url.path, message)
        return _error_response(400, message or "Invalid input", ErrorCode.INVALID_INPUT)

    app.include_router(router)
    app.include_router(ws_router)

    app.mount(
        "/images",
        StaticFiles(directory=settings.images_path, check_dir=False),
        name="images",
    )
    app.mount(
        "/thumbnails",
        StaticFiles(directory=settings.thumbnails_path, check_dir=False),
        name="thumbnails",
    )

    public_dir = settings.public_dir
    for path, page in _PAGES.items():
        app.add_api_route(path, _page_endpoint(public_dir / page), methods=["GET"], include_in_schema=False)

    if public_dir.is_dir():
        app.mount("/", PublicFiles(directory=public_dir, html=True), name="public")
    else:
        logger.warning("Public directory %s not found; front-end assets are not served", public_dir)

    return app


app = create_app()
