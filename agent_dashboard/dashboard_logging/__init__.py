"""
Structured logging for the agent dashboard.

JSON logs with timestamp, level, event_type and keyword context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from agent_dashboard.dashboard_logging.logger import (
    configure_structlog,
    get_logger,
    resolve_log_level,
    uvicorn_log_level,
)

__all__ = ["configure_structlog", "get_logger", "resolve_log_level", "uvicorn_log_level"]
