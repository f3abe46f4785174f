"""
Event Feed Route
================

GET /events              SSE feed of the global bus topics
GET /events?view=<id>    SSE feed filtered for one view (data-for-tab,
                         alert and health-update topics of that view)

SSE Protocol Format:
    id: 42
    event: telemetry-update
    data: {"kind": "telemetry-update", "stream_id": "iss-position", ...}

    (blank line signals end of event)
"""

from fastapi import APIRouter, Query, Request
from fastapi.responses import StreamingResponse

from src.application.api.dependencies import EventBusDep, TabManagerDep
from src.application.services.event_stream import EventStreamBridge, feed_topics
from src.core.logging.logger import get_logger

router = APIRouter(prefix="/events", tags=["Events"])
logger = get_logger(__name__)


@router.get(
    "",
    responses={200: {"description": "SSE event feed", "content": {"text/event-stream": {}}}},
)
async def event_feed(
    request: Request,
    event_bus: EventBusDep,
    tab_manager: TabManagerDep,
    view: str | None = Query(default=None, description="Only events re-published for this view"),
):
    if view is not None:
        tab_manager.get_view(view)

    bridge = EventStreamBridge(event_bus, feed_topics(view))
    logger.info("SSE feed opened", view=view, topics=bridge.topics)

    return StreamingResponse(
        bridge.stream(request.is_disconnected),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            # Disable NGINX response buffering
            "X-Accel-Buffering": "no",
        },
    )
