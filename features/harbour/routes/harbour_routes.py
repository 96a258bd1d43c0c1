from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from features.common.exceptions.harbour_exceptions import InvalidConfigurationError
from features.harbour.models.harbour_types import AppState, SailingSettings
from features.harbour.services.update_orchestrator import UpdateOrchestrator
from features.tides.models.tide_types import MarinaTimes

router = APIRouter(
    prefix="/harbour",
    tags=["Harbour"]
)

def get_orchestrator(request: Request) -> UpdateOrchestrator:
    """Dependency to get the UpdateOrchestrator instance."""
    return request.app.state.orchestrator

@router.get(
    "/state",
    response_model=AppState,
    summary="Get current harbour conditions",
    description="Returns the latest tide, marina, wind/wave and weather snapshot with the sailing assessment"
)
async def get_state(
    orchestrator: UpdateOrchestrator = Depends(get_orchestrator)
) -> AppState:
    return orchestrator.state

@router.post(
    "/refresh",
    response_model=AppState,
    summary="Refresh harbour conditions",
    description="Runs a refresh cycle. Returns the current snapshot unchanged if a cycle is already running"
)
async def refresh(
    orchestrator: UpdateOrchestrator = Depends(get_orchestrator)
) -> AppState:
    return await orchestrator.refresh()

@router.get(
    "/marinas",
    response_model=List[MarinaTimes],
    summary="Get marina gate times",
    description="Returns today's published marina open/close times"
)
async def get_marinas(
    orchestrator: UpdateOrchestrator = Depends(get_orchestrator)
) -> List[MarinaTimes]:
    return orchestrator.state.marina_table

@router.get(
    "/settings",
    response_model=SailingSettings,
    summary="Get sailing settings"
)
async def get_settings(
    orchestrator: UpdateOrchestrator = Depends(get_orchestrator)
) -> SailingSettings:
    return orchestrator.state.settings

@router.put(
    "/settings",
    response_model=AppState,
    summary="Update sailing settings",
    description="Replaces marina, boat draft and limits, then refreshes conditions"
)
async def update_settings(
    values: Dict[str, Any] = Body(...),
    orchestrator: UpdateOrchestrator = Depends(get_orchestrator)
) -> AppState:
    try:
        return await orchestrator.update_settings(values)
    except InvalidConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
