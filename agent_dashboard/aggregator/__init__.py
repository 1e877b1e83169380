"""
Combines collaborators, relay queries and history into
the dashboard's JSON views.
"""

from agent_dashboard.aggregator.status import StatusAggregator, build_aggregator

__all__ = ["StatusAggregator", "build_aggregator"]
