"""Analytics models: page views, form funnel events and tracking links.

Analytics rows reference events loosely (no foreign key) so that deleting
an event never loses its traffic history.
"""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

JSONType = JSON().with_variant(JSONB(), "postgresql")


class TrackingLink(Base):
    """A shareable token (``?tid=``) attributing visits to an outreach channel."""

    __tablename__ = "tracking_links"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    token: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    channel: Mapped[Optional[str]] = mapped_column(
        String, nullable=True
    )  # sms/email/social/...
    event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )

    click_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    clicked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )  # first click only
    form_started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    form_completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<TrackingLink {self.token}>"


class PageView(Base):
    __tablename__ = "page_views"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    page_path: Mapped[str] = mapped_column(String, default="/", nullable=False)
    page_title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Attribution
    utm_source: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_medium: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_campaign: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_term: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_content: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tracking_id: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, index=True
    )
    visitor_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Device
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    browser_version: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    os_version: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    device_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    screen_width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    screen_height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    viewport_width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    viewport_height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    color_depth: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    pixel_ratio: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    device_memory: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    hardware_concurrency: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    touch_support: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    max_touch_points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    platform: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    webgl_renderer: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    pdf_viewer_enabled: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Network and geo (from proxy headers)
    ip_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    timezone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    connection_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    connection_downlink: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Browser preferences
    language: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    languages: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    cookie_enabled: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    do_not_track: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Engagement (filled by the leave beacon)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    scroll_depth_pct: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_scroll_y: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )

    def __repr__(self):
        return f"<PageView {self.page_path}>"


class FormEvent(Base):
    """One step of a visitor's progress through a registration form."""

    __tablename__ = "form_events"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    page_view_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True
    )
    visitor_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    session_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tracking_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    event_type: Mapped[str] = mapped_column(
        String, nullable=False, index=True
    )  # form_view/form_start/field_focus/field_blur/submit_*
    field_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    field_has_value: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    form_data: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<FormEvent {self.event_type}>"
