"""Subscribers Service models package."""

from services.subscribers_service.models.subscriber import (
    DEFAULT_SOURCE,
    SUBSCRIBED,
    Subscriber,
)

__all__ = ["DEFAULT_SOURCE", "SUBSCRIBED", "Subscriber"]
