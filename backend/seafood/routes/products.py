"""
SeaFood Delivery Backend — Product Routes
==========================================
"""

from fastapi import APIRouter, Depends

from seafood.dependencies import get_store
from seafood.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductOut,
)
from seafood.services.catalog_service import catalog_service
from seafood.services.store_base import DataStore

router = APIRouter(tags=["Products"])


@router.get("/products", response_model=ProductListEnvelope, summary="List the catalogue")
async def list_products(store: DataStore = Depends(get_store)) -> ProductListEnvelope:
    products = await catalog_service.list_products(store)
    return ProductListEnvelope(products=[ProductOut.model_validate(p) for p in products])


@router.post("/admin/add-product", response_model=ProductEnvelope, summary="Add a product")
async def add_product(
    body: ProductCreate,
    store: DataStore = Depends(get_store),
) -> ProductEnvelope:
    product = await catalog_service.add_product(store, body.model_dump())
    return ProductEnvelope(message="Product added!", product=ProductOut.model_validate(product))
