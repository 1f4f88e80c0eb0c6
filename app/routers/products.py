from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import PageParams, product_id_path
from app.responses import envelope
from app.schemas import ProductIn
from app.services import product_service

router = APIRouter(prefix="/api/v1/products", tags=["products"])

@router.get("")
async def list_products(paging: PageParams = Depends(), db: AsyncSession = Depends(get_db)):
    page = await product_service.get_products(db, paging.page, paging.per_page)
    return envelope(200, data=page, message="Products loaded successfully!")

@router.post("", status_code=201)
async def create_product(data: ProductIn, db: AsyncSession = Depends(get_db)):
    product = await product_service.create_product(db, data)
    return envelope(201, data=product, message="Data stored successfully!")

@router.get("/{product_id}", name="products.show")
async def get_product(product_id: int = Depends(product_id_path), db: AsyncSession = Depends(get_db)):
    product = await product_service.get_product(db, product_id)
    return envelope(200, data=product, message="Product fetched successfully!")

# The body stays a raw mapping so the product is resolved (404) before the
# payload is validated (422).
@router.put("/{product_id}")
async def update_product(
    product_id: int = Depends(product_id_path),
    data: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    product = await product_service.update_product(db, product_id, data)
    return envelope(200, data=product, message="Product updated successfully!")

@router.delete("/{product_id}")
async def delete_product(product_id: int = Depends(product_id_path), db: AsyncSession = Depends(get_db)):
    await product_service.delete_product(db, product_id)
    return envelope(200, message="Product deleted successfully")
