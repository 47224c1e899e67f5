"""Analytics Service schemas package."""

from services.analytics_service.schemas.main import (
    EngagementUpdate,
    FormEventCreate,
    PageViewCreate,
)

__all__ = ["EngagementUpdate", "FormEventCreate", "PageViewCreate"]
