"""Health checks behind the API's /health and /ready probes.

A check is an async callable returning a ServiceCheck. The checker runs
every registered check concurrently, bounds each one with a timeout, and
reports the worst status it saw.

Example:
    checker = HealthChecker(version="1.0.0")

    async def check_groq() -> ServiceCheck:
        return ServiceCheck(name="groq", status=ServiceStatus.HEALTHY)

    checker.add_check("groq", check_groq)
    report = await checker.check_all()
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from lookbook.core.logging import get_logger

logger = get_logger(__name__)


class ServiceStatus(Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


# Worst status wins when checks are combined.
_SEVERITY = {
    ServiceStatus.HEALTHY: 0,
    ServiceStatus.UNKNOWN: 1,
    ServiceStatus.DEGRADED: 2,
    ServiceStatus.UNHEALTHY: 3,
}


@dataclass
class ServiceCheck:
    """Outcome of one check."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class HealthReport:
    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [check.to_dict() for check in self.checks],
        }


HealthCheckFunc = Callable[[], Awaitable[ServiceCheck]]


def aggregate_status(checks: list[ServiceCheck]) -> ServiceStatus:
    """Overall status for a set of checks; no checks means healthy."""
    if not checks:
        return ServiceStatus.HEALTHY
    return max((check.status for check in checks), key=_SEVERITY.__getitem__)


class HealthChecker:
    """Registry of named health checks.

    Args:
        version: Application version reported with every HealthReport.
        timeout: Seconds before a single check counts as unhealthy.
    """

    def __init__(self, version: str | None = None, timeout: float = 10.0) -> None:
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version
        self._timeout = timeout

    @property
    def names(self) -> list[str]:
        return list(self._checks)

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run one check. Timeouts and exceptions become UNHEALTHY results.

        Raises:
            KeyError: If no check is registered under ``name``.
        """
        check_func = self._checks[name]
        started = time.perf_counter()

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        try:
            result = await asyncio.wait_for(check_func(), timeout=self._timeout)
        except TimeoutError:
            logger.warning("health_check_timed_out", check=name, timeout=self._timeout)
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message="Health check timed out",
            )
        except Exception as ex:
            logger.warning("health_check_failed", check=name, error=str(ex))
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message=str(ex),
            )

        if result.latency_ms is None:
            result.latency_ms = elapsed_ms()
        return result

    async def check_all(self) -> HealthReport:
        """Run every registered check concurrently."""
        checks = list(await asyncio.gather(*(self.check_one(name) for name in self._checks)))
        return HealthReport(
            status=aggregate_status(checks),
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
            version=self._version,
        )
