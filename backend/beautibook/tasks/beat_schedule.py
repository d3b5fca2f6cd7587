# backend/beautibook/tasks/beat_schedule.py
"""
Celery Beat schedule configuration for BeautiBook.

The only periodic job is storage hygiene for expired holds. Readers already
ignore expired rows, so a delayed or skipped run never affects bookings.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

from beautibook.core.config import settings


def get_beat_schedule(cleanup_interval_minutes: Optional[int] = None) -> Dict[str, Dict[str, Any]]:
    """Build the beat schedule from configuration."""
    interval = cleanup_interval_minutes or settings.hold_cleanup_interval_minutes
    return {
        "cleanup-expired-holds": {
            "task": "cleanup_expired_holds",
            "schedule": timedelta(minutes=interval),
            "options": {
                "queue": "maintenance",
                # A run older than one interval is superseded by the next
                "expires": interval * 60,
            },
        },
    }
