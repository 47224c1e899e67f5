"""Analytics service routers package."""

from services.analytics_service.routers.track import router as track_router

__all__ = ["track_router"]
