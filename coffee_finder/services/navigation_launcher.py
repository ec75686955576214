"""Turn-by-turn navigation hand-off."""
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Optional
from urllib.parse import urlencode

from coffee_finder.models.search import Coordinate

logger = logging.getLogger(__name__)

APPLE_MAPS_URL = "https://maps.apple.com/"
_DIRECTION_FLAGS = {"driving": "d", "walking": "w", "transit": "r"}


def directions_url(destination: Coordinate, name: str, mode: str = "driving") -> str:
    """Maps deep link for directions to ``destination``."""
    params = {
        "daddr": f"{destination.latitude:.6f},{destination.longitude:.6f}",
        "q": name,
        "dirflg": _DIRECTION_FLAGS.get(mode, "d"),
    }
    return f"{APPLE_MAPS_URL}?{urlencode(params)}"


class NavigationLauncher(ABC):
    @abstractmethod
    def launch(self, destination: Coordinate, name: str, mode: str = "driving") -> str:
        """Hand the destination to a navigation app and return the link used. Fire and forget."""
        ...


class MapsUrlNavigationLauncher(NavigationLauncher):
    """Builds a maps deep link and passes it to ``opener``. Keeps the last ``history`` links."""

    def __init__(self, opener: Optional[Callable[[str], None]] = None, history: int = 100):
        self.opener = opener
        self.launched: deque = deque(maxlen=history)

    def launch(self, destination: Coordinate, name: str, mode: str = "driving") -> str:
        url = directions_url(destination, name, mode)
        self.launched.append(url)
        logger.info(f"Directions to '{name}' ({mode})", extra={"url": url})
        if self.opener is not None:
            self.opener(url)
        return url
