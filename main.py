"""Main entrypoint and application factory for the ledger metrics exporter.

This module configures logging, builds the FastAPI application that exposes the ledger snapshot as Prometheus metrics, and runs the refresh scheduler for the lifetime of the app. It also includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from scalar_fastapi import get_scalar_api_reference

from app.api.routes import router
from app.core.settings import Settings, get_settings
from app.core.utils import LOGGER_ROOT, add_file_handler, get_logger
from app.metrics.collector import build_registry
from app.metrics.store import SnapshotStore
from app.services.report_service import HledgerReportGenerator, ReportGenerator
from app.workers.refresh import RefreshCycle, RefreshScheduler


# --- Logging Setup ---
def setup_logging(settings: Settings) -> None:
    """Configure the exporter root logger for console and, optionally, file output."""
    logger = get_logger(LOGGER_ROOT)
    logger.setLevel(logging.INFO)
    if settings.log_file:
        add_file_handler(logger, settings.log_file)


def create_app(settings: Settings | None = None, generator: ReportGenerator | None = None) -> FastAPI:
    """Build the application, its snapshot store and the refresh scheduler driving it."""
    settings = settings or get_settings()
    setup_logging(settings)
    store = SnapshotStore()
    cycle = RefreshCycle.from_settings(settings, store, generator or HledgerReportGenerator(settings))
    scheduler = RefreshScheduler(cycle.run, settings.refresh_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Run the eager refresh before serving, then keep refreshing in the background."""
        _ = app  # Silence unused argument warning
        if settings.refresh_on_startup:
            scheduler.start()
        try:
            yield
        finally:
            scheduler.stop(timeout=settings.report_timeout_seconds)

    app = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title="Ledger Metrics Exporter",
        description="""
    The Ledger Metrics Exporter periodically turns an hledger journal into a snapshot of expense, asset and income metrics.

    **Endpoints:**
    - `GET /metrics`: Prometheus exposition of the current snapshot.
    - `GET /snapshot`: The current snapshot as JSON.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.registry = build_registry(store)
    app.state.scheduler = scheduler
    app.include_router(router)

    @app.get("/scalar", include_in_schema=False)
    async def scalar_docs() -> HTMLResponse:
        """Return Scalar API reference."""
        return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port)
