"""Events service routers package."""

from services.events_service.routers.events import router as events_router
from services.events_service.routers.rsvp import router as rsvp_router

__all__ = [
    "events_router",
    "rsvp_router",
]
