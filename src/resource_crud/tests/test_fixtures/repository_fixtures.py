"""Fixtures for repository and service tests."""

import pytest
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resource_crud.repositories.product_repository import ProductRepository
from resource_crud.schemas.product import ProductRecord
from resource_crud.services.product_service import ProductService, build_product_service

# NOTE: fixtures here depend on `session_factory` from conftest.py, which points
# at a fresh database for every test.


@pytest.fixture
def faker_instance() -> Faker:
    fake = Faker()
    Faker.seed(1234)
    return fake


@pytest.fixture
def product_repository(session_factory: async_sessionmaker[AsyncSession]) -> ProductRepository:
    return ProductRepository(session_factory)


@pytest.fixture
def product_service(session_factory: async_sessionmaker[AsyncSession]) -> ProductService:
    return build_product_service(session_factory)


@pytest.fixture
def sample_product_data() -> dict[str, str]:
    """Deterministic payload used by most tests."""
    return {
        "name": "Pen",
        "description": "Blue ink pen",
    }


@pytest.fixture
def create_product(product_repository: ProductRepository, faker_instance: Faker):
    """
    Factory helper creating products with optional overrides.

    Usage:
        product = await create_product(name="Stapler")
    """
    async def _create(**overrides) -> ProductRecord:
        data = {
            "name": faker_instance.word().title(),
            "description": faker_instance.sentence(nb_words=6),
        }
        data.update(overrides)
        return await product_repository.create(**data)

    return _create


@pytest.fixture
async def created_product(create_product, sample_product_data) -> ProductRecord:
    return await create_product(**sample_product_data)


@pytest.fixture
async def multiple_products(create_product) -> list[ProductRecord]:
    """Three persisted products, in creation order."""
    return [await create_product(name=f"Product {idx}") for idx in range(3)]
