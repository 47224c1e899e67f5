"""Analytics Service models package."""

from services.analytics_service.models.core import FormEvent, PageView, TrackingLink

__all__ = ["FormEvent", "PageView", "TrackingLink"]
