# backend/beautibook/tasks/celery_app.py
"""
Celery application configuration for BeautiBook.

This module sets up the Celery app with Redis as the broker and backend,
configures task serialization, timezone, and the beat schedule.
"""

import logging
import os
from typing import Any

from celery import Celery, Task
from celery.signals import setup_logging

from beautibook.core.config import settings


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Celery: Configured Celery application instance
    """
    # Priority: CELERY_BROKER_URL -> settings.redis_url
    broker_url = os.getenv("CELERY_BROKER_URL") or settings.redis_url
    result_backend = os.getenv("CELERY_RESULT_BACKEND") or broker_url

    celery_app = Celery("beautibook", broker=broker_url, backend=result_backend)

    celery_app.conf.update(
        {
            "task_serializer": "json",
            "accept_content": ["json"],
            "result_serializer": "json",
            "timezone": settings.business_timezone,
            "enable_utc": True,
            "worker_prefetch_multiplier": 4,
            "worker_max_tasks_per_child": 1000,
            # Hold cleanup runs every minute; a stuck run must not pile up
            "task_soft_time_limit": 50,
            "task_time_limit": 60,
            "task_acks_late": True,
            "task_reject_on_worker_lost": True,
            "task_default_retry_delay": 10,
            "worker_hijack_root_logger": False,
        }
    )

    celery_app.conf.imports = ("beautibook.tasks.hold_cleanup",)
    celery_app.conf.task_routes = {
        "cleanup_expired_holds": {"queue": "maintenance"},
    }

    from beautibook.tasks.beat_schedule import get_beat_schedule

    celery_app.conf.beat_schedule = get_beat_schedule()

    return celery_app


# Disable Celery's default logging configuration
@setup_logging.connect  # type: ignore[misc]
def config_loggers(*args: Any, **kwargs: Any) -> None:
    """Configure logging to integrate with the application's logging setup."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


celery_app = create_celery_app()


class BaseTask(Task):  # type: ignore[misc]
    """Base task with automatic error handling and logging."""

    autoretry_for = (Exception,)
    retry_kwargs = {"max_retries": 3, "countdown": 10}
    retry_backoff = True
    retry_jitter = True

    def on_failure(self, exc: Exception, task_id: str, args: Any, kwargs: Any, einfo: Any) -> None:
        """Log task failures."""
        logging.getLogger(__name__).error(
            f"Task {self.name}[{task_id}] failed with exception: {exc}",
            exc_info=True,
            extra={"task_id": task_id, "task_name": self.name},
        )


celery_app.Task = BaseTask
