"""Attendance service routers package."""

from services.attendance_service.routers.checkin import router as checkin_router

__all__ = ["checkin_router"]
