"""
JSON endpoints for the Product resource.

Bodies are accepted as arbitrary JSON and passed to the service unchanged;
field validation belongs to the service's validator, not to FastAPI.
The collection routes answer with and without a trailing slash.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from resource_crud.api.dependencies import get_product_service
from resource_crud.schemas.product import ProductRecord
from resource_crud.services.product_service import ProductService

router = APIRouter()


@router.get("", response_model=list[ProductRecord])
@router.get("/", response_model=list[ProductRecord], include_in_schema=False)
async def list_products(service: ProductService = Depends(get_product_service)):
    return await service.list()


@router.get("/{product_id}", response_model=ProductRecord)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    return await service.get(product_id)


@router.post("", response_model=ProductRecord, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ProductRecord, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_product(
    payload: Any = Body(default=None),
    service: ProductService = Depends(get_product_service),
):
    return await service.create(payload)


@router.put("/{product_id}", response_model=ProductRecord)
async def update_product(
    product_id: str,
    payload: Any = Body(default=None),
    service: ProductService = Depends(get_product_service),
):
    return await service.update(product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    await service.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
