"""
Unit tests for the points-of-interest search client
"""
import httpx
import pytest

from coffee_finder.config.settings import METERS_PER_MILE, PlacesSettings
from coffee_finder.core.exceptions import ErrorCode, SearchError
from coffee_finder.models.search import Coordinate
from coffee_finder.services.places_client import (
    NominatimPlacesBackend,
    PlacesSearchClient,
    viewbox_for,
)
from tests.helpers import NYC, FakePlacesBackend, venue_at


@pytest.mark.asyncio
async def test_search_window_is_twice_the_radius():
    backend = FakePlacesBackend()

    await PlacesSearchClient(backend).search("coffee", NYC, 10.0)

    query, center, span = backend.calls[0]
    assert query == "coffee"
    assert center == NYC
    assert span == pytest.approx(2 * 10.0 * METERS_PER_MILE)


@pytest.mark.asyncio
async def test_venues_become_candidates_in_backend_order():
    backend = FakePlacesBackend([
        venue_at(NYC, 3.0, "Later", road="Broadway"),
        venue_at(NYC, 1.0, None),
    ])

    candidates = await PlacesSearchClient(backend).search("coffee", NYC, 10.0)

    assert [c.name for c in candidates] == ["Later", None]
    assert candidates[0].address == {"road": "Broadway"}


@pytest.mark.asyncio
async def test_empty_backend_result_is_not_an_error():
    assert await PlacesSearchClient(FakePlacesBackend()).search("coffee", NYC, 10.0) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    httpx.ConnectError("offline"),
    httpx.ReadTimeout("slow"),
    ValueError("bad json"),
])
async def test_backend_failures_raise_search_error(error):
    with pytest.raises(SearchError) as exc_info:
        await PlacesSearchClient(FakePlacesBackend(error=error)).search("coffee", NYC, 10.0)

    assert exc_info.value.error_code == ErrorCode.SEARCH_FAILED


@pytest.mark.asyncio
async def test_invalid_radius_raises_search_error():
    with pytest.raises(SearchError, match="Radius must be positive"):
        await PlacesSearchClient(FakePlacesBackend()).search("coffee", NYC, 0)


def test_viewbox_is_centered_square():
    west, north, east, south = viewbox_for(Coordinate(0.0, 0.0), 2000.0)

    assert north == pytest.approx(-south)
    assert east == pytest.approx(-west)
    assert north == pytest.approx(1000.0 / 111320.0)


def test_viewbox_is_clamped_near_pole():
    west, north, east, south = viewbox_for(Coordinate(89.99, 179.9), 50000.0)

    assert north <= 90.0
    assert east <= 180.0
    assert west >= -180.0


@pytest.mark.asyncio
async def test_nominatim_backend_bounded_query_and_parsing():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[
            {
                "name": "Stumptown",
                "lat": "40.7457",
                "lon": "-73.9881",
                "address": {"house_number": "18", "road": "West 29th Street", "town": "New York", "postcode": "10001"},
            },
            {"name": "", "lat": "40.72", "lon": "-74.0"},
        ])

    config = PlacesSettings(base_url="https://places.test", max_results=25)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        client_ = PlacesSearchClient(NominatimPlacesBackend(config=config, client=client))
        candidates = await client_.search("coffee", NYC, 10.0)

    assert seen["params"]["q"] == "coffee"
    assert seen["params"]["bounded"] == "1"
    assert seen["params"]["limit"] == "25"
    assert len(seen["params"]["viewbox"].split(",")) == 4

    assert candidates[0].name == "Stumptown"
    assert candidates[0].coordinate == Coordinate(40.7457, -73.9881)
    assert candidates[0].address_line == "18, West 29th Street, New York, 10001"
    assert candidates[1].name is None


@pytest.mark.asyncio
async def test_nominatim_backend_http_error_raises_search_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "boom"}))
    async with httpx.AsyncClient(transport=transport) as client:
        client_ = PlacesSearchClient(NominatimPlacesBackend(config=PlacesSettings(), client=client))
        with pytest.raises(SearchError) as exc_info:
            await client_.search("coffee", NYC, 10.0)

    assert exc_info.value.details == {"status_code": 500}


@pytest.mark.asyncio
async def test_nominatim_backend_unexpected_payload_raises_search_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "Unable to geocode"}))
    async with httpx.AsyncClient(transport=transport) as client:
        client_ = PlacesSearchClient(NominatimPlacesBackend(config=PlacesSettings(), client=client))
        with pytest.raises(SearchError, match="Unexpected places response"):
            await client_.search("coffee", NYC, 10.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [RuntimeError("backend bug"), KeyError("lat"), AttributeError("get")])
async def test_unexpected_backend_errors_raise_search_error(error):
    with pytest.raises(SearchError, match="unexpected backend error") as exc_info:
        await PlacesSearchClient(FakePlacesBackend(error=error)).search("coffee", NYC, 10.0)

    assert exc_info.value.error_code == ErrorCode.SEARCH_FAILED


@pytest.mark.asyncio
async def test_nominatim_backend_skips_non_object_items():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[
        "stray",
        {"name": "Stumptown", "lat": "40.7457", "lon": "-73.9881"},
        None,
    ]))
    async with httpx.AsyncClient(transport=transport) as client:
        client_ = PlacesSearchClient(NominatimPlacesBackend(config=PlacesSettings(), client=client))
        candidates = await client_.search("coffee", NYC, 10.0)

    assert [c.name for c in candidates] == ["Stumptown"]
