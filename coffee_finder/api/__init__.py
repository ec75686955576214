# API routers

from .health_endpoints import router as health_router
from .location_endpoints import router as location_router
from .search_endpoints import router as search_router

__all__ = ["health_router", "location_router", "search_router"]
