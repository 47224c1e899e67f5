"""Attendance Service schemas package."""

from services.attendance_service.schemas.main import (
    CheckInResponse,
    CheckInStats,
    QRCheckIn,
    WalkInCheckIn,
)

__all__ = [
    "CheckInResponse",
    "CheckInStats",
    "QRCheckIn",
    "WalkInCheckIn",
]
