"""
Tab Routes

GET  /tabs                     registered views and the active one
POST /tabs/{view_id}/activate  switch the active view

An unknown view id raises UnknownViewError, which the app maps to 404.
"""

from fastapi import APIRouter

from src.application.api.dependencies import TabManagerDep
from src.application.api.models.telemetry import TabActivationResponse, TabListResponse

router = APIRouter(prefix="/tabs", tags=["Tabs"])


@router.get("", response_model=TabListResponse)
async def list_tabs(tab_manager: TabManagerDep):
    return TabListResponse(views=tab_manager.views, active_view=tab_manager.active_view)


@router.post("/{view_id}/activate", response_model=TabActivationResponse)
async def activate_tab(view_id: str, tab_manager: TabManagerDep):
    view = tab_manager.get_view(view_id)
    view_status = await tab_manager.switch_to_tab(view_id)
    return TabActivationResponse(view=view, status=view_status)
