"""
FastAPI server: dashboard JSON API plus the static dashboard page.

The aggregator is app-scoped (app.state.aggregator). Importing this module
builds nothing; the module-level app lives in api_server.app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from agent_dashboard import __version__
from agent_dashboard.aggregator.status import StatusAggregator, build_aggregator
from agent_dashboard.api_server.routes import router
from agent_dashboard.config.settings import DashboardSettings, get_settings
from agent_dashboard.dashboard_logging import get_logger

logger = get_logger(__name__)


def create_app(
    settings: DashboardSettings | None = None,
    aggregator: StatusAggregator | None = None,
) -> FastAPI:
    """
    Build the ASGI app. Static files are mounted from the static_dir of the
    given settings (or the aggregator's). Without an aggregator one is built
    from those settings at startup, falling back to get_settings() only then.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "aggregator", None) is None:
            resolved = settings or get_settings()
            app.state.aggregator = build_aggregator(resolved)
        logger.info(
            "api_started",
            relay_url=app.state.aggregator.settings.relay_url,
            history_path=str(app.state.aggregator.history_store.path),
        )
        yield
        logger.info("api_stopped")

    app = FastAPI(
        title="Agent Dashboard",
        description="Wallet, trust, attestations, services and DVM activity for one agent.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator
    app.include_router(router, prefix="/api", tags=["Dashboard"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    static_settings = settings or (aggregator.settings if aggregator is not None else None)
    if static_settings is not None:
        _mount_static(app, static_settings.static_dir)
    return app


def _mount_static(app: FastAPI, directory: Path) -> None:
    if not directory.is_dir():
        logger.info("static_dir_missing", path=str(directory))
        return
    index = directory / "index.html"

    @app.get("/", include_in_schema=False)
    def index_page() -> FileResponse:
        if not index.is_file():
            raise HTTPException(status_code=404, detail="index.html not found")
        return FileResponse(index)

    app.mount("/", StaticFiles(directory=directory), name="static")

