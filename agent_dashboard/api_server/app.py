"""
FastAPI/ASGI application entrypoint. Importing this module loads settings
(.env and CONFIG_DIR) once, so the static directory is mounted up front.

Run with: uvicorn agent_dashboard.api_server.app:app --host 0.0.0.0 --port 8406
"""

from agent_dashboard.api_server.server import create_app
from agent_dashboard.config.settings import get_settings

app = create_app(settings=get_settings())

__all__ = ["app"]
