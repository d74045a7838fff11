import json
import logging
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from resource_crud.core.logging.builder import setup_logging
from resource_crud.exceptions.base import StorageError
from resource_crud.exceptions.mapper import storage_error_handler
from resource_crud.main import create_app
from resource_crud.tests.conftest import make_test_settings


async def test_request_id_in_response_and_logs(session_factory, capsys):
    settings = make_test_settings(LOG_FORMAT="json", LOG_LEVEL="INFO")
    app = create_app(settings=settings, session_factory=session_factory)

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            resp = await client.get(f"/api/v1/products/{uuid.uuid4()}")
    finally:
        captured = capsys.readouterr()
        setup_logging(make_test_settings())

    assert resp.status_code == 404
    rid = resp.headers["X-Request-ID"]

    records = []
    for line in captured.err.splitlines():
        try:
            records.append(json.loads(line))
        except ValueError:
            continue

    events = {rec["message"] for rec in records if rec.get("request_id") == rid}
    assert "service.get.not_found" in events


async def test_storage_failure_is_logged_and_sanitized(caplog):
    caplog.set_level(logging.DEBUG, logger="resource_crud.exceptions.mapper")

    with pytest.raises(StorageError) as exc_info:
        async with storage_error_handler("Product", "create"):
            raise OperationalError("INSERT INTO products ...", {}, Exception("disk I/O error"))

    assert exc_info.value.message == "Failed to create Product"
    assert isinstance(exc_info.value.__cause__, OperationalError)

    failure = next(r for r in caplog.records if r.getMessage() == "storage.failure")
    assert failure.levelno == logging.ERROR
    assert failure.operation == "create"
    assert failure.error_type == "OperationalError"
    assert failure.exc_info is not None
