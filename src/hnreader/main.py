"""FastAPI application entry point for HN Reader."""

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from hnreader import __version__
from hnreader.api.dependencies import AppContext
from hnreader.api.routes import router
from hnreader.clients.feed import FeedFetcher
from hnreader.clients.store import ArticleStore
from hnreader.config import Settings, get_settings
from hnreader.services.orchestrator import SyncOrchestrator, SyncState
from hnreader.services.scheduler import SyncRunner
from hnreader.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given settings.

    Args:
        settings: Settings to use. Defaults to settings from the environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Own the store, fetcher and sync runner for the process lifetime."""
        setup_logging(settings.log_level, settings.log_json)
        logger.info("HN Reader starting", version=__version__)

        store = ArticleStore(
            settings.db_path,
            max_open=settings.db_max_open,
            max_idle=settings.db_max_idle,
            max_lifetime=settings.db_max_lifetime,
        )
        await store.open()
        fetcher = FeedFetcher(settings.feed_url, timeout=settings.fetch_timeout)
        state = SyncState()
        runner = SyncRunner(
            SyncOrchestrator(fetcher, store, state),
            interval=settings.sync_interval,
            serialize=settings.serialize_syncs,
        )

        app.state.context = AppContext(
            settings=settings,
            store=store,
            fetcher=fetcher,
            state=state,
            runner=runner,
            templates=Jinja2Templates(directory=settings.templates_dir),
        )
        runner.start()
        try:
            yield
        finally:
            logger.info("HN Reader shutting down")
            await runner.stop()
            await fetcher.close()
            await store.close()
            logger.info("Server stopped gracefully")

    app = FastAPI(
        title="HN Reader",
        description="Read/unread tracker for the HN Daily digest",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "HTTP request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            remote_addr=request.client.host if request.client else None,
        )
        return response

    if Path(settings.static_dir).is_dir():
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    app.include_router(router)
    return app


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    logger.info("Server listening", address=f"http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_config=None,
    )
