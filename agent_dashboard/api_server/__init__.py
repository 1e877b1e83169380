"""
API server package — HTTP/JSON interface for the dashboard.

Thin FastAPI routes over StatusAggregator; every /api view answers 200 with
either its data or {"error": "..."}.
"""
