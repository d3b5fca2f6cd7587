"""Application-wide constants for the BeautiBook booking core."""

from __future__ import annotations

BRAND_NAME = "BeautiBook"
API_TITLE = f"{BRAND_NAME} Booking API"
API_DESCRIPTION = "Slot availability and booking holds for salon appointments"
API_VERSION = "1.0.0"

# Hold lifecycle
DEFAULT_HOLD_TTL_MINUTES = 5
DEFAULT_SLOT_INTERVAL_MINUTES = 15

# Business calendar
DEFAULT_BUSINESS_TIMEZONE = "America/Los_Angeles"

# Customer contact constraints
MIN_PHONE_LENGTH = 10
MAX_NAME_LENGTH = 100

# Slot reasons surfaced to clients
REASON_BOOKED = "booked"
REASON_HELD = "held"
REASON_OUTSIDE_HOURS = "outside working hours"
REASON_PAST = "in the past"

# Hold analytics event names (also Prometheus label values)
HOLD_EVENT_CREATED = "created"
HOLD_EVENT_CONFLICT = "conflict"
HOLD_EVENT_RELEASED = "released"
HOLD_EVENT_CONVERTED = "converted"
HOLD_EVENT_EXPIRED_CLEANUP = "expired_cleanup"
