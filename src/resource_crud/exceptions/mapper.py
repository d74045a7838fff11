import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError

from .base import ServiceError, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def storage_error_handler(model_name: str | None = None, operation: str | None = None):
    """
    Usage:
        async with storage_error_handler(self.model.__name__, "create"):
            ... DB ops that may raise SQLAlchemyError ...

    Domain errors (ServiceError subclasses) pass through untouched. Database and
    I/O failures are logged with stack trace and re-raised as a sanitized StorageError.
    Rollback is left to the enclosing `session.begin()` block.
    """
    try:
        yield
    except ServiceError:
        raise
    except (SQLAlchemyError, OSError) as exc:
        logger.exception(
            "storage.failure",
            extra={"model": model_name, "operation": operation, "error_type": type(exc).__name__},
        )
        # The raw DB message stays at DEBUG; it may contain row values.
        logger.debug("storage.failure_raw", extra={"model": model_name, "raw": str(exc)})
        raise StorageError(f"Failed to {operation or 'operate on'} {model_name or 'record'}") from exc
