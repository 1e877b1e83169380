"""
Local process supervision probe: systemctl --user is-active <name>.service.

Blocking subprocess calls; the aggregator runs probe_all in a worker thread.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Any, Sequence

from agent_dashboard.dashboard_logging import get_logger

logger = get_logger(__name__)

PROBE_TIMEOUT_SEC = 5.0
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


@dataclass(frozen=True)
class ServiceStatus:
    name: str
    status: str
    healthy: bool

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "status": self.status, "healthy": self.healthy}


class ServiceProbe:
    def __init__(self, *, timeout: float = PROBE_TIMEOUT_SEC) -> None:
        self._timeout = timeout

    def probe(self, name: str) -> ServiceStatus:
        """Any failure (non-zero exit, missing systemctl, timeout) reads as inactive."""
        try:
            result = subprocess.run(
                ["systemctl", "--user", "is-active", f"{name}.service"],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.debug("service_probe_failed", service=name, error=str(e))
            return ServiceStatus(name=name, status=STATUS_INACTIVE, healthy=False)
        status = result.stdout.strip()
        return ServiceStatus(name=name, status=status, healthy=status == STATUS_ACTIVE)

    def probe_all(self, names: Sequence[str]) -> list[ServiceStatus]:
        return [self.probe(name) for name in names]
