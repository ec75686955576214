from typing import Optional

from pydantic import BaseModel, Field

from coffee_finder.models.search import AuthorizationState, SearchState


class SearchRequest(BaseModel):
    postal_code: Optional[str] = Field(default=None, max_length=32)


class LocationFixRequest(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class LocationFailureRequest(BaseModel):
    reason: str = "unknown"


class AuthorizationRequest(BaseModel):
    state: AuthorizationState


class PlaceRead(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    address_line: Optional[str] = None
    distance_miles: float


class RegionRead(BaseModel):
    latitude: float
    longitude: float
    span_meters: float


class StatusRead(BaseModel):
    kind: str
    count: Optional[int] = None
    reason: Optional[str] = None
    message: Optional[str] = None


class SearchStateRead(BaseModel):
    status: StatusRead
    status_text: Optional[str] = None
    places: list[PlaceRead] = []
    focused_place: Optional[PlaceRead] = None
    region: Optional[RegionRead] = None
    alert_message: Optional[str] = None
    is_searching: bool = False
    generation: int = 0

    @classmethod
    def from_state(cls, state: SearchState) -> "SearchStateRead":
        status = state.status
        return cls(
            status=StatusRead(
                kind=status.kind.value,
                count=status.count,
                reason=status.reason.value if status.reason else None,
                message=status.message,
            ),
            status_text=state.status_text,
            places=[PlaceRead(**p.to_dict()) for p in state.places],
            focused_place=PlaceRead(**state.focused_place.to_dict()) if state.focused_place else None,
            region=RegionRead(**state.region.to_dict()) if state.region else None,
            alert_message=state.alert_message,
            is_searching=state.is_searching,
            generation=state.generation,
        )


class DirectionsRead(BaseModel):
    place: PlaceRead
    url: str
    mode: str = "driving"
