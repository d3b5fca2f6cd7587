# backend/beautibook/services/base.py
"""
Base Service Pattern for the booking core.

Provides common functionality for all service classes including:
- Transaction management
- An injectable clock
- Logging
- Performance monitoring
"""

from contextlib import contextmanager
from datetime import datetime
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from ..core.timezone_utils import ensure_utc, utc_now
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

F = TypeVar("F", bound=Callable[..., Any])

DATABASE_FAILURE_MESSAGE = "Database operation failed"


class BaseService:
    """
    Base class for all service layer components.

    Services are plain objects built per request from a session and a clock;
    they hold no state between calls.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        """
        Initialize base service.

        Args:
            db: Database session
            clock: Returns the current instant; defaults to the wall clock
        """
        self.db = db
        self._clock: Clock = clock or utc_now
        self.logger = logging.getLogger(self.__class__.__name__)

    def now(self) -> datetime:
        """Current instant as aware UTC, read once per decision."""
        return ensure_utc(self._clock())

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Commits on success. Any exception rolls back; raw database errors
        that reach this point are wrapped as ServiceException, domain
        exceptions pass through unchanged.
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(DATABASE_FAILURE_MESSAGE) from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_hold")
            def create_hold(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.time()
                success = False
                error_type = None

                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.time() - start_time
                    if elapsed * 1000 > settings.slow_operation_threshold_ms:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

                    if settings.prometheus_enabled:
                        prometheus_metrics.record_service_operation(
                            service=self.__class__.__name__,
                            operation=operation_name,
                            duration=elapsed,
                            status="success" if success else "error",
                            error_type=error_type,
                        )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log an operation with context.

        Args:
            operation: Operation name
            **context: Additional context to log
        """
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})
