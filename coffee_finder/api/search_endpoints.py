"""Search endpoints: run, clear, inspect, focus and hand off to navigation."""
from fastapi import APIRouter, Depends

from coffee_finder.core.dependencies import get_orchestrator
from coffee_finder.schemas.base import Envelope
from coffee_finder.schemas.search import DirectionsRead, PlaceRead, SearchRequest, SearchStateRead
from coffee_finder.services import SearchOrchestrator

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=Envelope[SearchStateRead])
async def run_search(
    request: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """
    Search coffee places around a postal code, or around the device
    location when no postal code is given.

    The outcome is always in the returned state; a failed search is still
    a 200 with ``status.kind == "failed"``.
    """
    state = await orchestrator.search(request.postal_code)
    return Envelope(status="ok", data=SearchStateRead.from_state(state))


@router.post("/clear", response_model=Envelope[SearchStateRead])
async def clear_results(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    state = orchestrator.clear()
    return Envelope(status="ok", data=SearchStateRead.from_state(state))


@router.get("/state", response_model=Envelope[SearchStateRead])
async def get_state(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/alert/dismiss", response_model=Envelope[SearchStateRead])
async def dismiss_alert(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    orchestrator.dismiss_alert()
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/places/{place_id}/focus", response_model=Envelope[SearchStateRead])
async def focus_place(place_id: str, orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    orchestrator.focus(place_id)
    return Envelope(status="ok", data=SearchStateRead.from_state(orchestrator.snapshot()))


@router.post("/places/{place_id}/directions", response_model=Envelope[DirectionsRead])
async def open_directions(place_id: str, orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    place, url = orchestrator.open_directions(place_id)
    payload = DirectionsRead(place=PlaceRead(**place.to_dict()), url=url)
    return Envelope(status="ok", data=payload)
