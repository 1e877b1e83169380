"""
Main entrypoint: load settings once, then serve the dashboard API with uvicorn.

Env: PORT, HOST, CONFIG_DIR, HISTORY_FILE, RELAY_URL, WOT_API_URL, LOG_LEVEL, etc.

Equivalent: uvicorn agent_dashboard.api_server.app:app --host 0.0.0.0 --port 8406
"""

import os

# Configure structured JSON logging before other imports that may log
from agent_dashboard.dashboard_logging import get_logger, uvicorn_log_level

logger = get_logger("main")


def main() -> None:
    """Resolve settings, then run the FastAPI server in the main thread."""
    from agent_dashboard.api_server.app import app
    from agent_dashboard.config import get_settings
    import uvicorn

    settings = get_settings()
    if settings.identity is None:
        logger.warning("main_identity_missing", message="identity views will report 'No identity configured'")
    logger.info("main_server_starting", host=settings.host, port=settings.port, url=f"http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=uvicorn_log_level(os.getenv("LOG_LEVEL")))


if __name__ == "__main__":
    main()
