"""Members service routers package."""

from services.members_service.routers.members import router as members_router

__all__ = ["members_router"]
