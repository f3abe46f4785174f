"""
FastAPI Dependency Injection Module
===================================

Route handlers never reach for module-level objects: the TelemetryRuntime
is built once in the application lifespan (or injected by tests through
create_app(runtime=...)) and stored on app.state. The functions below pull
its parts out for FastAPI's Depends() system.

Example:
    @router.get("/streams")
    async def list_streams(orchestrator: OrchestratorDep):
        return orchestrator.get_system_health().streams
"""

from typing import Annotated

from fastapi import Depends, Request

from src.application.runtime import TelemetryRuntime
from src.core.config.settings import Settings, get_settings
from src.core.events.event_bus import EventBus
from src.telemetry.services.stream_orchestrator import StreamOrchestrator
from src.telemetry.services.tab_manager import TabManager


def get_runtime(request: Request) -> TelemetryRuntime:
    """
    Retrieve the runtime from application state.

    Raises:
        RuntimeError: If the lifespan did not run (app used without startup)
    """
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError(
            "TelemetryRuntime not initialized in app.state. "
            "This indicates the application lifespan startup didn't complete properly."
        )
    return runtime


def get_orchestrator(runtime: Annotated[TelemetryRuntime, Depends(get_runtime)]) -> StreamOrchestrator:
    return runtime.orchestrator


def get_tab_manager(runtime: Annotated[TelemetryRuntime, Depends(get_runtime)]) -> TabManager:
    return runtime.tab_manager


def get_event_bus(runtime: Annotated[TelemetryRuntime, Depends(get_runtime)]) -> EventBus:
    return runtime.event_bus


# Type aliases for cleaner route signatures
RuntimeDep = Annotated[TelemetryRuntime, Depends(get_runtime)]
OrchestratorDep = Annotated[StreamOrchestrator, Depends(get_orchestrator)]
TabManagerDep = Annotated[TabManager, Depends(get_tab_manager)]
EventBusDep = Annotated[EventBus, Depends(get_event_bus)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
