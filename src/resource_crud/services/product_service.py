from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resource_crud.repositories.product_repository import ProductRepository
from resource_crud.schemas.product import PRODUCT_SCHEMA, ProductRecord
from .resource_service import ResourceService

ProductService = ResourceService[ProductRecord]


def build_product_service(session_factory: async_sessionmaker[AsyncSession]) -> ProductService:
    """Wire the Product repository and schema into a ResourceService."""
    return ResourceService(ProductRepository(session_factory), PRODUCT_SCHEMA, "Product")
