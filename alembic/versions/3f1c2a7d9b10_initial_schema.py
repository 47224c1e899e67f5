"""initial_schema

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '3f1c2a7d9b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_status_enum = sa.Enum('draft', 'published', 'cancelled', name='event_status_enum')
rsvp_status_enum = sa.Enum('attending', 'maybe', 'not_attending', name='rsvp_status_enum')
checkin_method_enum = sa.Enum('self', 'walk_in', 'qr_code', 'admin', name='checkin_method_enum')


def upgrade() -> None:
    """Upgrade schema - Create events, members, subscribers and analytics tables."""

    # Create members table
    op.create_table(
        'members',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('auth_id', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('employer', sa.String(), nullable=True),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('date_joined', sa.Date(), nullable=True),
        sa.Column('referral_source', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_members_auth_id', 'members', ['auth_id'], unique=True)
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_index('ix_members_phone', 'members', ['phone'])

    # Create donors table
    op.create_table(
        'donors',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('occupation', sa.String(), nullable=True),
        sa.Column('total_donated', sa.Numeric(12, 2), nullable=True),
        sa.Column('is_recurring_donor', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_donors_email', 'donors', ['email'])
    op.create_index('ix_donors_phone', 'donors', ['phone'])

    # Create events table
    op.create_table(
        'events',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_type', sa.String(), nullable=True),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('event_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', event_status_enum, nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('location_address', sa.String(), nullable=True),
        sa.Column('hide_address_before_rsvp', sa.Boolean(), nullable=True),
        sa.Column('multiple_locations', sa.Boolean(), nullable=True),
        sa.Column('location_one_name', sa.String(), nullable=True),
        sa.Column('location_one_address', sa.String(), nullable=True),
        sa.Column('location_two_name', sa.String(), nullable=True),
        sa.Column('location_two_address', sa.String(), nullable=True),
        sa.Column('location_three_name', sa.String(), nullable=True),
        sa.Column('location_three_address', sa.String(), nullable=True),
        sa.Column('rsvp_enabled', sa.Boolean(), nullable=True),
        sa.Column('rsvp_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('attendee_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('checkin_enabled', sa.Boolean(), nullable=True),
        sa.Column('checkin_start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checkin_end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_events_event_date', 'events', ['event_date'])

    # Create event_attendees table
    op.create_table(
        'event_attendees',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('member_id', UUID(as_uuid=True), nullable=True),
        sa.Column('guest_name', sa.String(), nullable=True),
        sa.Column('guest_email', sa.String(), nullable=True),
        sa.Column('guest_phone', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip', sa.String(), nullable=True),
        sa.Column('employer', sa.String(), nullable=True),
        sa.Column('occupation', sa.String(), nullable=True),
        sa.Column('rsvp_status', rsvp_status_enum, nullable=False),
        sa.Column('guest_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('checked_in', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_in_by', checkin_method_enum, nullable=True),
        sa.Column('rsvp_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'member_id', name='uq_event_attendee_member')
    )
    op.create_index('ix_event_attendees_event_id', 'event_attendees', ['event_id'])
    op.create_index('ix_event_attendees_member_id', 'event_attendees', ['member_id'])
    op.create_index('ix_event_attendees_guest_email', 'event_attendees', ['guest_email'])
    op.create_index('ix_event_attendees_guest_phone', 'event_attendees', ['guest_phone'])

    # Create subscribers table
    op.create_table(
        'subscribers',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('phone_e164', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('zip_code', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('subscription_status', sa.String(), nullable=True),
        sa.Column('optin_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_subscribers_email', 'subscribers', ['email'], unique=True)

    # Create tracking_links table
    op.create_table(
        'tracking_links',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('channel', sa.String(), nullable=True),
        sa.Column('event_id', UUID(as_uuid=True), nullable=True),
        sa.Column('click_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('clicked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('form_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('form_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tracking_links_token', 'tracking_links', ['token'], unique=True)
    op.create_index('ix_tracking_links_event_id', 'tracking_links', ['event_id'])

    # Create page_views table
    op.create_table(
        'page_views',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=True),
        sa.Column('page_path', sa.String(), server_default='/', nullable=False),
        sa.Column('page_title', sa.String(), nullable=True),
        sa.Column('referrer', sa.Text(), nullable=True),
        sa.Column('utm_source', sa.String(), nullable=True),
        sa.Column('utm_medium', sa.String(), nullable=True),
        sa.Column('utm_campaign', sa.String(), nullable=True),
        sa.Column('utm_term', sa.String(), nullable=True),
        sa.Column('utm_content', sa.String(), nullable=True),
        sa.Column('tracking_id', sa.String(), nullable=True),
        sa.Column('visitor_id', sa.String(), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('browser', sa.String(), nullable=True),
        sa.Column('browser_version', sa.String(), nullable=True),
        sa.Column('os', sa.String(), nullable=True),
        sa.Column('os_version', sa.String(), nullable=True),
        sa.Column('device_type', sa.String(), nullable=True),
        sa.Column('screen_width', sa.Integer(), nullable=True),
        sa.Column('screen_height', sa.Integer(), nullable=True),
        sa.Column('viewport_width', sa.Integer(), nullable=True),
        sa.Column('viewport_height', sa.Integer(), nullable=True),
        sa.Column('color_depth', sa.Integer(), nullable=True),
        sa.Column('pixel_ratio', sa.Float(), nullable=True),
        sa.Column('device_memory', sa.Float(), nullable=True),
        sa.Column('hardware_concurrency', sa.Integer(), nullable=True),
        sa.Column('touch_support', sa.Boolean(), nullable=True),
        sa.Column('max_touch_points', sa.Integer(), nullable=True),
        sa.Column('platform', sa.String(), nullable=True),
        sa.Column('webgl_renderer', sa.String(), nullable=True),
        sa.Column('pdf_viewer_enabled', sa.Boolean(), nullable=True),
        sa.Column('ip_address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('region', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=True),
        sa.Column('connection_type', sa.String(), nullable=True),
        sa.Column('connection_downlink', sa.Float(), nullable=True),
        sa.Column('language', sa.String(), nullable=True),
        sa.Column('languages', JSONB(), nullable=True),
        sa.Column('cookie_enabled', sa.Boolean(), nullable=True),
        sa.Column('do_not_track', sa.Boolean(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('scroll_depth_pct', sa.Integer(), nullable=True),
        sa.Column('max_scroll_y', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_page_views_event_id', 'page_views', ['event_id'])
    op.create_index('ix_page_views_tracking_id', 'page_views', ['tracking_id'])
    op.create_index('ix_page_views_visitor_id', 'page_views', ['visitor_id'])
    op.create_index('ix_page_views_created_at', 'page_views', ['created_at'])

    # Create form_events table
    op.create_table(
        'form_events',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=True),
        sa.Column('page_view_id', UUID(as_uuid=True), nullable=True),
        sa.Column('visitor_id', sa.String(), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True),
        sa.Column('tracking_id', sa.String(), nullable=True),
        sa.Column('event_type', sa.String(), nullable=False),
        sa.Column('field_name', sa.String(), nullable=True),
        sa.Column('field_has_value', sa.Boolean(), nullable=True),
        sa.Column('form_data', JSONB(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_form_events_event_id', 'form_events', ['event_id'])
    op.create_index('ix_form_events_event_type', 'form_events', ['event_type'])


def downgrade() -> None:
    """Downgrade schema - Drop all tables and enum types."""
    op.drop_table('form_events')
    op.drop_table('page_views')
    op.drop_table('tracking_links')
    op.drop_table('subscribers')
    op.drop_table('event_attendees')
    op.drop_table('events')
    op.drop_table('donors')
    op.drop_table('members')

    checkin_method_enum.drop(op.get_bind(), checkfirst=True)
    rsvp_status_enum.drop(op.get_bind(), checkfirst=True)
    event_status_enum.drop(op.get_bind(), checkfirst=True)
