from fastapi import Request

from resource_crud.services.product_service import ProductService


def get_product_service(request: Request) -> ProductService:
    """FastAPI dependency returning the service wired by the app factory."""
    return request.app.state.product_service
