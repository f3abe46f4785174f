"""
Health Check Routes
===================

GET /health       system health snapshot (readiness)
GET /health/live  liveness probe

The snapshot endpoint answers 503 while the system is critical or offline
so load balancers stop routing to an instance whose upstreams are all down.
The body is the same snapshot either way. The liveness probe never checks
dependencies: a dead upstream is no reason to restart the process.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.application.api.dependencies import OrchestratorDep
from src.application.api.models.telemetry import LivenessResponse
from src.core.config.constants import SystemStatus
from src.telemetry.models.health import SystemHealthSnapshot

router = APIRouter(prefix="/health", tags=["Health"])

_UNAVAILABLE = {SystemStatus.CRITICAL, SystemStatus.OFFLINE}


@router.get(
    "",
    response_model=SystemHealthSnapshot,
    responses={503: {"description": "System is critical or offline", "model": SystemHealthSnapshot}},
)
async def health_check(orchestrator: OrchestratorDep):
    """Current system health snapshot."""
    snapshot = orchestrator.get_system_health()
    if snapshot.status in _UNAVAILABLE:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=snapshot.model_dump(mode="json"),
        )
    return snapshot


@router.get("/live", response_model=LivenessResponse)
async def liveness_probe():
    return LivenessResponse()
