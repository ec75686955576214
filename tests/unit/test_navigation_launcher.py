from urllib.parse import parse_qs, urlparse

from coffee_finder.models.search import Coordinate
from coffee_finder.services.navigation_launcher import MapsUrlNavigationLauncher, directions_url


def test_directions_url_driving():
    url = directions_url(Coordinate(40.75, -73.99), "Blue Bottle & Co")
    query = parse_qs(urlparse(url).query)
    assert query["daddr"] == ["40.750000,-73.990000"]
    assert query["q"] == ["Blue Bottle & Co"]
    assert query["dirflg"] == ["d"]


def test_directions_url_walking():
    assert "dirflg=w" in directions_url(Coordinate(0.0, 0.0), "x", mode="walking")


def test_launcher_passes_url_to_opener():
    opened = []
    launcher = MapsUrlNavigationLauncher(opener=opened.append)
    url = launcher.launch(Coordinate(1.0, 2.0), "Cafe")
    assert opened == list(launcher.launched) == [url]


def test_launcher_history_keeps_most_recent():
    launcher = MapsUrlNavigationLauncher(history=2)
    urls = [launcher.launch(Coordinate(1.0, 2.0), name) for name in ("A", "B", "C")]
    assert list(launcher.launched) == urls[1:]
