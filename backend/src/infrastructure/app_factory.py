from asyncio import Event
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ..modules.common.utils.error_handler import register_exception_handlers
from .config.settings import (
    DatabaseSettings,
    EnvironmentOption,
    EnvironmentSettings,
    Settings,
    get_settings,
)
from .database.session import create_tables
from .logging import configure_logging, generate_correlation_id, get_logger, reset_correlation_id, set_correlation_id

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Request-ID"


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio.

    PDF parsing, local embedding and file I/O all run in worker threads.
    """
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


def lifespan_factory(
    settings: Settings,
    create_tables_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    Args:
        settings: Application settings
        create_tables_on_startup: Whether to create the pgvector extension and tables on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        initialization_complete = Event()
        app.state.initialization_complete = initialization_complete

        await set_threadpool_tokens()

        if isinstance(settings, DatabaseSettings) and create_tables_on_startup:
            await create_tables()
            logger.info("Database tables ready")

        initialization_complete.set()
        yield

    return lifespan


def check_auth_settings(settings: Settings) -> None:
    """Refuse to start a staging or production app without a token signing secret.

    Raises:
        RuntimeError: If ``AUTH_JWT_SECRET`` is empty outside development.
    """
    deployed = isinstance(settings, EnvironmentSettings) and settings.ENVIRONMENT in (
        EnvironmentOption.PRODUCTION,
        EnvironmentOption.STAGING,
    )
    if deployed and not settings.AUTH_JWT_SECRET:
        raise RuntimeError("AUTH_JWT_SECRET must be set in staging and production")


async def correlation_id_middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Tag every log record of a request with the caller's ``X-Request-ID`` or a fresh id."""
    correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
    token = set_correlation_id(correlation_id)
    try:
        response = await call_next(request)
    finally:
        reset_correlation_id(token)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def create_application(
    router: APIRouter,
    settings: Optional[Settings] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    enable_cors: Optional[bool] = None,
    cors_origins: Optional[List[str]] = None,
    enable_docs_in_production: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures a FastAPI application based on the provided settings.

    Domain exceptions raised anywhere in a request are turned into JSON error
    responses, and every request runs with a correlation id.

    Args:
        router: The APIRouter containing the routes for the application
        settings: Application settings (uses get_settings() if None)
        lifespan: Optional lifespan function. If None, uses lifespan_factory.
        create_tables_on_startup: Defaults to settings.CREATE_TABLES_ON_STARTUP if None.
        enable_cors: Defaults to settings.CORS_ENABLED if None.
        cors_origins: Defaults to settings.CORS_ORIGINS_LIST if None.
        enable_docs_in_production: Defaults to settings.ENABLE_DOCS_IN_PRODUCTION if None.
        enable_gzip: Defaults to settings.GZIP_ENABLED if None.
        title: The title of the API, defaults to settings.APP_NAME.
        summary: A short summary of the API.
        description: A detailed description of the API, defaults to settings.APP_DESCRIPTION.
        version: The version of the API, defaults to settings.VERSION.
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """

    if settings is None:
        settings = get_settings()

    check_auth_settings(settings)
    configure_logging()

    _create_tables_on_startup = (
        create_tables_on_startup if create_tables_on_startup is not None else settings.CREATE_TABLES_ON_STARTUP
    )
    _enable_cors = enable_cors if enable_cors is not None else settings.CORS_ENABLED
    _cors_origins = cors_origins if cors_origins is not None else settings.CORS_ORIGINS_LIST
    _enable_docs_in_production = (
        enable_docs_in_production if enable_docs_in_production is not None else settings.ENABLE_DOCS_IN_PRODUCTION
    )
    _enable_gzip = enable_gzip if enable_gzip is not None else settings.GZIP_ENABLED

    metadata: Dict[str, Any] = {
        "title": title or settings.APP_NAME,
        "description": description or settings.APP_DESCRIPTION,
        "version": version or settings.VERSION,
        "docs_url": settings.DOCS_URL,
        "redoc_url": settings.REDOC_URL,
        "openapi_url": settings.OPENAPI_URL,
    }
    if summary is not None:
        metadata["summary"] = summary

    kwargs.update(metadata)

    hide_docs = (
        isinstance(settings, EnvironmentSettings)
        and settings.ENVIRONMENT == EnvironmentOption.PRODUCTION
        and not _enable_docs_in_production
    )
    if hide_docs:
        kwargs.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

    if lifespan is None:
        lifespan = lifespan_factory(settings, create_tables_on_startup=_create_tables_on_startup)

    application = FastAPI(lifespan=lifespan, **kwargs)

    application.include_router(router)
    register_exception_handlers(application)

    if _enable_cors:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=settings.CORS_ALLOW_METHODS.split(","),
            allow_headers=settings.CORS_ALLOW_HEADERS.split(","),
            expose_headers=[CORRELATION_HEADER],
        )

    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

    if settings.LOG_CORRELATION_ID:
        application.middleware("http")(correlation_id_middleware)

    return application
