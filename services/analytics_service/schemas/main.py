"""Request bodies sent by the browser tracker.

The tracker is fire-and-forget, so every field is optional and unknown
keys are ignored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class _TrackerBody(BaseModel):
    model_config = ConfigDict(extra="ignore")


class EngagementUpdate(_TrackerBody):
    page_view_id: Optional[str] = None
    duration_seconds: Optional[int] = None
    scroll_depth_pct: Optional[int] = None
    max_scroll_y: Optional[int] = None


class PageViewCreate(EngagementUpdate):
    event_id: Optional[str] = None
    page_path: Optional[str] = None
    page_title: Optional[str] = None
    referrer: Optional[str] = None

    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    tracking_id: Optional[str] = None
    visitor_id: Optional[str] = None
    session_id: Optional[str] = None

    user_agent: Optional[str] = None
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None
    color_depth: Optional[int] = None
    pixel_ratio: Optional[float] = None
    device_memory: Optional[float] = None
    hardware_concurrency: Optional[int] = None
    touch_support: Optional[bool] = None
    max_touch_points: Optional[int] = None
    platform: Optional[str] = None
    webgl_renderer: Optional[str] = None
    pdf_viewer_enabled: Optional[bool] = None

    language: Optional[str] = None
    languages: Optional[list[str]] = None
    cookie_enabled: Optional[bool] = None
    do_not_track: Optional[bool] = None
    connection_type: Optional[str] = None
    connection_downlink: Optional[float] = None

    @property
    def is_engagement_beacon(self) -> bool:
        """sendBeacon can only POST, so leave-page updates arrive here too."""
        return bool(self.page_view_id) and "duration_seconds" in self.model_fields_set


class FormEventCreate(_TrackerBody):
    event_id: Optional[str] = None
    page_view_id: Optional[str] = None
    visitor_id: Optional[str] = None
    session_id: Optional[str] = None
    tracking_id: Optional[str] = None
    event_type: Optional[str] = None
    field_name: Optional[str] = None
    field_has_value: Optional[bool] = None
    form_data: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
