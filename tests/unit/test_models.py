import pytest

from coffee_finder.core.validation import ValidationError
from coffee_finder.models.search import (
    Candidate,
    Coordinate,
    MapRegion,
    SearchStatus,
    StatusKind,
    format_address_line,
)


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (0.0, -181.0)])
def test_coordinate_rejects_out_of_range(lat, lon):
    with pytest.raises(ValidationError):
        Coordinate(lat, lon)


def test_coordinate_bounds_are_inclusive():
    assert Coordinate(90.0, -180.0).to_dict() == {"latitude": 90.0, "longitude": -180.0}


def test_address_line_skips_blank_components():
    assert format_address_line({"road": "Main St", "city": " ", "postcode": 94103}) == "Main St, 94103"
    assert format_address_line({}) is None


def test_candidate_display_name():
    assert Candidate("  Ritual ", None).display_name() == "Ritual"
    assert Candidate(None, None).display_name("Cafe") == "Cafe"


def test_terminal_statuses():
    assert SearchStatus.success(1).is_terminal
    assert SearchStatus.empty().is_terminal
    assert not SearchStatus.searching().is_terminal
    assert SearchStatus.empty().kind == StatusKind.EMPTY


def test_region_to_dict():
    region = MapRegion(Coordinate(1.0, 2.0), 100.0)
    assert region.to_dict() == {"latitude": 1.0, "longitude": 2.0, "span_meters": 100.0}
