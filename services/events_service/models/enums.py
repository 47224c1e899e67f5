"""Enum definitions for events service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class RSVPStatus(str, enum.Enum):
    ATTENDING = "attending"
    MAYBE = "maybe"
    NOT_ATTENDING = "not_attending"


class CheckInMethod(str, enum.Enum):
    SELF = "self"
    WALK_IN = "walk_in"
    QR_CODE = "qr_code"
    ADMIN = "admin"


FUNDRAISER_EVENT_TYPE = "fundraiser"
