"""Subscribers service routers package."""

from services.subscribers_service.routers.subscribers import (
    router as subscribers_router,
)

__all__ = ["subscribers_router"]
