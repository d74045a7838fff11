from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resource_crud.models.product import Product
from resource_crud.schemas.product import ProductRecord
from .base_repository import BaseRepository


class ProductRepository(BaseRepository[Product, ProductRecord]):
    """Repository for Product records."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], **kwargs):
        super().__init__(Product, ProductRecord, session_factory, **kwargs)
