"""Subscribers Service schemas package."""

from services.subscribers_service.schemas.main import (
    SUBSCRIBE_PHONE_ERROR,
    SubscriberCreate,
    SubscriberResponse,
)

__all__ = ["SUBSCRIBE_PHONE_ERROR", "SubscriberCreate", "SubscriberResponse"]
