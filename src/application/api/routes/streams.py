"""
Stream Routes

GET  /streams       runtime summaries of every registered stream
POST /streams/stop  stop every active stream
"""

from fastapi import APIRouter

from src.application.api.dependencies import OrchestratorDep
from src.application.api.models.telemetry import StopStreamsResponse, StreamListResponse
from src.core.logging.logger import get_logger

router = APIRouter(prefix="/streams", tags=["Streams"])
logger = get_logger(__name__)


@router.get("", response_model=StreamListResponse)
async def list_streams(orchestrator: OrchestratorDep):
    snapshot = orchestrator.get_system_health()
    return StreamListResponse(
        streams=list(snapshot.streams.values()),
        active=orchestrator.active_stream_ids(),
    )


@router.post("/stop", response_model=StopStreamsResponse)
async def stop_all_streams(orchestrator: OrchestratorDep):
    stopped = orchestrator.active_stream_ids()
    await orchestrator.stop_all_streams()
    logger.info("All streams stopped via API", stopped=stopped)
    return StopStreamsResponse(stopped=stopped)
