"""
System Routes

POST /system/retry                    manual re-initialization after a
                                      critical failure
POST /alerts/{alert_id}/acknowledge   acknowledge an alert (404 if unknown
                                      or already acknowledged)
"""

from fastapi import APIRouter, HTTPException, status

from src.application.api.dependencies import OrchestratorDep, RuntimeDep
from src.application.api.models.telemetry import AlertAcknowledgeResponse, RetryResponse
from src.core.logging.logger import get_logger

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.post("/system/retry", response_model=RetryResponse)
async def retry_initialization(runtime: RuntimeDep):
    initialized = await runtime.retry_initialization()
    logger.info(
        "Manual re-initialization requested",
        initialized=initialized,
        active_view=runtime.tab_manager.active_view,
    )
    return RetryResponse(initialized=initialized, status=runtime.orchestrator.status)


@router.post("/alerts/{alert_id}/acknowledge", response_model=AlertAcknowledgeResponse)
async def acknowledge_alert(alert_id: str, orchestrator: OrchestratorDep):
    if not orchestrator.acknowledge_alert(alert_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Alert '{alert_id}' not found or already acknowledged",
        )
    return AlertAcknowledgeResponse(alert_id=alert_id, acknowledged=True)
