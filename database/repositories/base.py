import functools
import logging
from datetime import date
from typing import Callable

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log
)

from core.exceptions import DataAccessError

logger = logging.getLogger(__name__)

READ_ATTEMPTS = 3
READ_RETRY_WAIT_SECONDS = 0.5

# Transient connection failures only; constraint and programming errors are not retried.
db_read_retry = retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(READ_ATTEMPTS),
    wait=wait_fixed(READ_RETRY_WAIT_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def translate_errors(operation: str) -> Callable:
    """Wrap SQLAlchemy failures into DataAccessError."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"{operation} failed: {e}", exc_info=True)
                raise DataAccessError(f"{operation} failed") from e
        return wrapper
    return decorator


class BaseRepository:
    def __init__(self, db: Session, today: Callable[[], date] = date.today):
        self.db = db
        self.today = today

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
