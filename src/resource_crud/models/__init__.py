"""
Centralized access to all database models.

    from resource_crud.models import Product
"""

from .product import Product

__all__ = [
    "Product",
]
