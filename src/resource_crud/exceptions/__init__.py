# resource_crud/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py      # App-level errors (ValidationError, NotFoundError, StorageError, ...)
# │   └── mapper.py    # Map SQLAlchemy / driver errors to StorageError

from .base import (
    ServiceError,
    ValidationError,
    NotFoundError,
    StorageError,
    InvalidFieldError,
)

__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "InvalidFieldError",
]
