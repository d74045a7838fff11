"""
Core pytest configuration for the entire test suite.

Only the database setup and logging installation shared by ALL tests lives here.
Domain fixtures (repositories, services, sample data) are in
tests/test_fixtures/ and imported at the bottom of this module.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above app imports so noisy libraries are quiet during collection.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# Ensure 'src' on sys.path so `import resource_crud...` works without an install
SRC = Path(__file__).resolve().parents[2]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest
from pytest import FixtureRequest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from resource_crud.config.settings import Settings
from resource_crud.core.logging.builder import setup_logging
from resource_crud.database.base import Base
from resource_crud.database.session import create_session_factory
from resource_crud import models  # noqa: F401 – import to register models with Base.metadata

logger = logging.getLogger(__name__)


def make_test_settings(**overrides) -> Settings:
    """Settings isolated from any local .env file."""
    values = {
        "ENV": "testing",
        "TESTING": True,
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "text",
        "LOG_TO_STDOUT": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install application logging for the whole session, then re-attach pytest's
    capture handler (dictConfig removes it) so caplog keeps working.
    """
    setup_logging(make_test_settings())

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url(tmp_path: Path) -> str:
    """
    `TEST_DATABASE_URL` (CI override) when set, otherwise a fresh SQLite file
    inside the test's tmp_path.
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url
    return f"sqlite+aiosqlite:///{tmp_path / 'test_database.db'}"


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    url = get_test_database_url(tmp_path)
    logger.debug(f"Using test DB: {safe_log_db_url(url)}")
    return url


@pytest.fixture()
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def test_settings(database_url: str) -> Settings:
    return make_test_settings(DB_URL=database_url, DB_CREATE_ALL=False)


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


# Repository / service test fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402
    faker_instance,
    product_repository,
    product_service,
    sample_product_data,
    create_product,
    created_product,
    multiple_products,
)
from .test_fixtures.api_fixtures import app, client  # noqa: E402
