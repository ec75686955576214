"""Location endpoints: the client device pushes fixes and permission changes here."""
from fastapi import APIRouter, Depends, HTTPException

from coffee_finder.core.dependencies import ServiceContainer, get_orchestrator, get_service_container
from coffee_finder.models.search import Coordinate
from coffee_finder.schemas.base import Envelope
from coffee_finder.schemas.search import (
    AuthorizationRequest,
    LocationFailureRequest,
    LocationFixRequest,
    SearchStateRead,
)
from coffee_finder.services import (
    AuthorizationChanged,
    FixFailed,
    FixReceived,
    LocationEvent,
    PushLocationService,
    SearchOrchestrator,
)

router = APIRouter(prefix="/location", tags=["location"])


def _push(container: ServiceContainer, event: LocationEvent) -> None:
    service = container.location_service
    if not isinstance(service, PushLocationService):
        raise HTTPException(status_code=400, detail="Location service does not accept pushed events")
    service.push(event)


@router.post("/fix", response_model=Envelope[SearchStateRead])
async def push_fix(
    request: LocationFixRequest,
    container: ServiceContainer = Depends(get_service_container),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    _push(container, FixReceived(Coordinate(request.latitude, request.longitude)))
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/failure", response_model=Envelope[SearchStateRead])
async def push_failure(
    request: LocationFailureRequest,
    container: ServiceContainer = Depends(get_service_container),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    _push(container, FixFailed(request.reason))
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/authorization", response_model=Envelope[SearchStateRead])
async def push_authorization(
    request: AuthorizationRequest,
    container: ServiceContainer = Depends(get_service_container),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    _push(container, AuthorizationChanged(request.state))
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/request", response_model=Envelope[SearchStateRead])
async def use_my_location(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    orchestrator.use_my_location()
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))
