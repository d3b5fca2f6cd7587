# backend/beautibook/tasks/hold_cleanup.py
"""
Celery task that deletes expired booking holds.

Purely storage hygiene: every reader treats an expired hold as absent
whether or not this task has run.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Callable, Dict, TypeVar, cast

from celery import shared_task
from sqlalchemy.orm import Session

from ..database import SessionLocal
from ..services.hold_service import HoldService

logger = logging.getLogger(__name__)


TaskCallable = TypeVar("TaskCallable", bound=Callable[..., Any])


def typed_shared_task(
    *task_args: Any, **task_kwargs: Any
) -> Callable[[TaskCallable], TaskCallable]:
    return cast(Callable[[TaskCallable], TaskCallable], shared_task(*task_args, **task_kwargs))


def run_hold_cleanup(db: Session) -> Dict[str, Any]:
    """Delete expired holds using the given session."""
    service = HoldService(db)
    deleted = service.cleanup_expired_holds()
    return {
        "status": "success",
        "deleted": deleted,
        "completed_at": datetime.now(timezone.utc).isoformat(),
    }


@typed_shared_task(name="cleanup_expired_holds")
def cleanup_expired_holds() -> Dict[str, Any]:
    """
    Periodic task to remove expired holds.

    Schedule with Celery beat (see beat_schedule.py):
    ```python
    'cleanup-expired-holds': {
        'task': 'cleanup_expired_holds',
        'schedule': timedelta(minutes=1),
    }
    ```
    """
    logger.info("Starting expired hold cleanup")

    db: Session = SessionLocal()
    try:
        result = run_hold_cleanup(db)
        logger.info(f"Expired hold cleanup completed. Removed {result['deleted']} holds")
        return result
    except Exception as e:
        logger.error(f"Error in expired hold cleanup task: {str(e)}")
        raise
    finally:
        db.close()
