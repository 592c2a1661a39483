"""Probe routes: /health, /ready and /live.

/health reports every check and is strict: anything short of healthy is a
503. /ready only fails when a check is unhealthy, so an API without a Groq
key still takes traffic and answers /suggest with a 500.
"""

from typing import Any

from fastapi import APIRouter, Request, Response

from lookbook.core.health import HealthReport, ServiceStatus
from lookbook.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

READY_STATUSES = (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)


async def _run_checks(request: Request) -> HealthReport:
    report: HealthReport = await request.app.state.health_checker.check_all()
    if report.status != ServiceStatus.HEALTHY:
        logger.warning(
            "health_degraded",
            status=report.status.value,
            failing=[c.name for c in report.checks if c.status != ServiceStatus.HEALTHY],
        )
    return report


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Every check with its status, latency and message."""
    report = await _run_checks(request)
    response.status_code = 200 if report.status == ServiceStatus.HEALTHY else 503
    return report.to_dict()


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    report = await _run_checks(request)
    ready = report.status in READY_STATUSES
    response.status_code = 200 if ready else 503
    return {
        "ready": ready,
        "status": report.status.value,
        "suggestions_enabled": all(
            c.status == ServiceStatus.HEALTHY for c in report.checks if c.name == "groq"
        ),
    }


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
