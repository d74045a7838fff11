import pytest

from resource_crud.exceptions.base import (
    InvalidFieldError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (ValidationError({"name": ["The name field is required."]}), 422, "validation_error"),
        (InvalidFieldError("bad", fields=["price"]), 422, "invalid_field"),
        (NotFoundError("Product with ID x not found", fields=["id"]), 404, "not_found"),
        (StorageError(), 503, "storage_error"),
        (ServiceError("plain"), 400, None),
    ],
)
def test_status_and_code(exc, status, code):
    assert exc.http_status() == status
    assert exc.error_code == code


def test_validation_error_payload_contains_all_errors():
    exc = ValidationError({
        "name": ["The name field must not be empty."],
        "description": ["The description field is required."],
    })

    assert exc.to_payload() == {
        "detail": "The given data was invalid.",
        "code": "validation_error",
        "fields": ["description", "name"],
        "errors": {
            "name": ["The name field must not be empty."],
            "description": ["The description field is required."],
        },
    }


def test_not_found_payload():
    exc = NotFoundError("Product with ID 1 not found", fields=["id"])

    assert exc.to_payload() == {"detail": "Product with ID 1 not found", "code": "not_found", "fields": ["id"]}


def test_str_includes_fields_and_code():
    exc = InvalidFieldError("Unknown field", fields=["price"])

    assert str(exc) == "Unknown field (fields: price; code: invalid_field)"


def test_storage_error_payload_has_no_fields():
    assert StorageError("Failed to create Product").to_payload() == {
        "detail": "Failed to create Product",
        "code": "storage_error",
    }
