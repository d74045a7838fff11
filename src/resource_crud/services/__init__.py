from .resource_service import ResourceService
from .product_service import ProductService, build_product_service

__all__ = ["ResourceService", "ProductService", "build_product_service"]
