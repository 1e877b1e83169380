"""
Test that dashboard_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from dashboard_logging and use the logger."""
    from agent_dashboard.dashboard_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_normalize_event_renames_event_to_event_type():
    from agent_dashboard.dashboard_logging.logger import _normalize_event

    out = _normalize_event(None, "info", {"event": "relay_collect_done", "events": 3})
    assert out["event_type"] == "relay_collect_done"
    assert out["message"] == "relay_collect_done"
    assert "event" not in out


def test_log_level_aliases():
    import logging

    from agent_dashboard.dashboard_logging import resolve_log_level

    assert resolve_log_level("WARN") == logging.WARNING
    assert resolve_log_level(" debug ") == logging.DEBUG
    assert resolve_log_level("fatal") == logging.CRITICAL
    assert resolve_log_level("verbose") == logging.INFO
    assert resolve_log_level(None) == logging.INFO


def test_uvicorn_log_level_accepts_only_uvicorn_names():
    from agent_dashboard.dashboard_logging import uvicorn_log_level

    assert uvicorn_log_level("WARN") == "warning"
    assert uvicorn_log_level("FATAL") == "critical"
    assert uvicorn_log_level("Trace") == "trace"
    assert uvicorn_log_level("") == "info"
    assert uvicorn_log_level("loud") == "info"
    for name in ("CRITICAL", "ERROR", "WARNING", "WARN", "INFO", "DEBUG", "TRACE", "FATAL", "nonsense"):
        assert uvicorn_log_level(name) in {"critical", "error", "warning", "info", "debug", "trace"}


def test_main_passes_mapped_level_to_uvicorn(monkeypatch, settings):
    import sys
    import types
    from unittest.mock import patch

    import main

    app = object()
    monkeypatch.setitem(sys.modules, "agent_dashboard.api_server.app", types.SimpleNamespace(app=app))
    monkeypatch.setenv("LOG_LEVEL", "WARN")
    with patch("agent_dashboard.config.get_settings", return_value=settings), patch("uvicorn.run") as run:
        main.main()
    assert run.call_args.args == (app,)
    assert run.call_args.kwargs["log_level"] == "warning"
