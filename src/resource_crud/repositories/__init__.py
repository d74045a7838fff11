"""
Repository layer.

    from resource_crud.repositories import BaseRepository, ProductRepository
"""

from .base_repository import BaseRepository
from .product_repository import ProductRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
]
