from .product import ProductRecord, PRODUCT_SCHEMA

__all__ = ["ProductRecord", "PRODUCT_SCHEMA"]
