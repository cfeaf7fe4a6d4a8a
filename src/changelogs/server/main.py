"""
FastAPI Main Application
========================

Builds the changelog HTTP application.

``create_app`` scans the changelog directory synchronously and registers every
endpoint before returning, so the server never accepts a connection while
routes are still being discovered. Filesystem errors during the scan propagate
and abort startup.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sentry_sdk.integrations.fastapi import FastApiIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from changelogs.config import ChangelogSettings, get_settings
from changelogs.core.catalog import ChangelogCatalog
from changelogs.core.loader import missing_changelog_message
from changelogs.core.versions import normalize_version
from changelogs.logging_config import request_id_ctx

from .registrar import RouteRegistrar

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("changelogs.access")

NOT_FOUND_BODY = "Unknown endpoint! (404)"
INTERNAL_ERROR_BODY = "There was an internal error processing this request."

# -----------------------------------------------------------------------------
# Metrics
# -----------------------------------------------------------------------------

REQUEST_COUNTER = Counter(
    "changelog_requests_total",
    "Total changelog HTTP requests",
    ["method", "route", "status"],
)
REQUEST_LATENCY = Histogram(
    "changelog_request_duration_seconds",
    "Changelog HTTP request latency",
    ["method"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1),
)


def configure_sentry(settings: ChangelogSettings) -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[FastApiIntegration()],
    )


def _client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded
    return request.client.host if request.client else "?"


def _route_label(request: Request, status_code: int) -> str:
    """Metrics label drawn from a fixed set: registered route paths plus two markers."""
    route = request.scope.get("route")
    if route is not None:
        return route.path
    return "<fallback>" if status_code == 200 else "<unmatched>"


def _fallback_response(request: Request) -> Optional[PlainTextResponse]:
    """
    Placeholder for ``/<known mod>/<version>`` when that version has no file.

    Built without touching the changelog cache.
    """
    if request.method != "GET":
        return None
    catalog: Optional[ChangelogCatalog] = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return None
    # A trailing slash adds an empty segment, which never matches.
    segments = request.url.path[1:].split("/")
    if len(segments) != 2:
        return None
    mod_id, version = segments
    if not catalog.has_mod(mod_id):
        return None
    # Only the canonical spelling; "v1.2.3" is not an alias of "1.2.3".
    if normalize_version(version) != version:
        return None
    return PlainTextResponse(missing_changelog_message(mod_id, version))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    registrar: RouteRegistrar = app.state.registrar
    catalog: ChangelogCatalog = app.state.catalog
    logger.info(
        "Serving %d changelog endpoints for %d mods (latest version: %s)",
        len(registrar.routes),
        len(catalog.mod_ids),
        catalog.latest_version,
    )
    yield
    logger.info("Changelog server stopped")


def create_app(settings: Optional[ChangelogSettings] = None) -> FastAPI:
    """
    Create the application and register every changelog endpoint.

    Args:
        settings: Configuration (default: global settings)

    Returns:
        The ready-to-serve FastAPI application

    Raises:
        OSError: If the changelog directory cannot be scanned
    """
    if settings is None:
        settings = get_settings()

    configure_sentry(settings)

    # Interactive docs are disabled so /docs, /redoc etc. remain free for mod ids.
    app = FastAPI(
        title="Changelog Server",
        description="Plain-text changelogs per mod and game version",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=3628800,
    )

    # ============================================================================
    # Error Handlers
    # ============================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Only GET is served, so a wrong method on a changelog path is just unmatched.
        if exc.status_code in (404, 405):
            fallback = _fallback_response(request)
            if fallback is not None:
                return fallback
            return PlainTextResponse(NOT_FOUND_BODY, status_code=404)
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    # ============================================================================
    # Middleware
    # ============================================================================

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        """Log each request and turn unexpected errors into a plain-text 500."""
        started = time.perf_counter()
        error: Optional[BaseException] = None
        try:
            response = await call_next(request)
        except Exception as exc:
            error = exc
            sentry_sdk.capture_exception(exc)
            response = PlainTextResponse(INTERNAL_ERROR_BODY, status_code=500)

        if settings.enable_metrics and request.url.path != settings.metrics_path:
            REQUEST_COUNTER.labels(
                method=request.method,
                route=_route_label(request, response.status_code),
                status=response.status_code,
            ).inc()
            REQUEST_LATENCY.labels(method=request.method).observe(time.perf_counter() - started)

        if error is None and settings.quiet:
            return response

        level = logging.INFO if error is None else logging.ERROR
        access_logger.log(
            level,
            "%s %s %s - %s %s %s",
            _client_address(request),
            request.method,
            request.url.path,
            response.status_code,
            response.headers.get("content-length", "?"),
            request.headers.get("user-agent", "?"),
            exc_info=error,
        )
        return response

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Attach a request_id to context and response headers for traceability."""
        incoming = request.headers.get("X-Request-ID")
        req_id = incoming or uuid.uuid4().hex
        token = request_id_ctx.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response

    # ============================================================================
    # Routes
    # ============================================================================

    registrar = RouteRegistrar(app)
    app.state.registrar = registrar

    if settings.enable_metrics:
        async def metrics():
            """Prometheus metrics endpoint."""
            return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

        app.add_api_route(settings.metrics_path, metrics, methods=["GET"], include_in_schema=False)
        registrar.reserve(settings.metrics_path)

    catalog = ChangelogCatalog(settings.changelog_root, registrar)
    app.state.catalog = catalog
    catalog.scan()

    return app
