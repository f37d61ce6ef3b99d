"""Health and system status endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter
from starlette.requests import Request

from .dependencies import HubDep, SettingsDep, StoreDep
from .schemas import ClientCounts, HealthResponse, SystemResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, store: StoreDep) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        images_count=len(store),
    )


@router.get("/system", response_model=SystemResponse)
async def system_info(store: StoreDep, hub: HubDep, settings: SettingsDep) -> SystemResponse:
    """Catalog and connection counters."""
    return SystemResponse(
        version=settings.system_version,
        images=len(store),
        active_images=store.count_active(),
        clients=ClientCounts(display=len(hub.display), control=len(hub.control)),
        current_slide=hub.current_slide,
    )
