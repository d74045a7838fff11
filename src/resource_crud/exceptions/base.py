"""
Typed failures raised by the validator, repositories and services.

Every failure the CRUD core can produce is one of these classes, so a transport
adapter can render any of them through `to_payload()` and `http_status()` without
knowing where it came from.
"""

from typing import Iterable, Mapping

FieldErrors = dict[str, list[str]]


class ServiceError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['name'])
    - error_code: canonical short code (e.g., 'not_found', 'validation_error') used by clients
    """

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        "validation_error": 422,
        "invalid_field": 422,
        "not_found": 404,
        "storage_error": 503,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.
        Standard shape:
            {
                "detail": "A human-friendly message",
                "code": "not_found",       # optional canonical code
                "fields": ["name"],        # optional list for client usage
            }
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """
        Return the HTTP status code that should accompany this error.
        Unknown or missing error codes default to 400 (Bad Request).
        """
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class ValidationError(ServiceError):
    """
    One or more field rules were violated.

    `errors` maps each offending field to the ordered list of messages for the
    rules it broke. All offending fields are present, never just the first one.
    """

    def __init__(self, errors: Mapping[str, Iterable[str]], message: str = "The given data was invalid."):
        self.errors: FieldErrors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(message, fields=sorted(self.errors), error_code="validation_error")

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["errors"] = {field: list(messages) for field, messages in self.errors.items()}
        return payload


class NotFoundError(ServiceError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class StorageError(ServiceError):
    """The underlying persistence layer failed. Callers decide whether to retry."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message, error_code="storage_error")


class InvalidFieldError(ServiceError):
    """Raised when the caller passes unknown or read-only fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


__all__ = [
    "FieldErrors",
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "InvalidFieldError",
]
