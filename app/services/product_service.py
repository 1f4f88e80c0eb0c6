"""
Product service — sequencing for the five catalog operations.

Each mutation runs validate → transaction → repository write → commit →
reload with Category.  Reads skip the transaction.  Failures leave this
module as ``NotFound``, ``ValidationFailed`` or ``PersistenceFailed``; the
router never sees a raw SQLAlchemy error.
"""
import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.exceptions import NotFound
from app.schemas import ProductIn, ProductPage, ProductResponse
from app.transactions import store_errors, transaction
from app.validation import validate_product

logger = logging.getLogger(__name__)

LIST_FAILED = "Failed to load products"
CREATE_FAILED = "Failed to create product!"
UPDATE_FAILED = "Failed to update product!"
DELETE_FAILED = "Failed to delete product!"


async def get_products(db: AsyncSession, page: int, per_page: int) -> ProductPage:
    with store_errors(LIST_FAILED):
        return await repository.list_products(db, page, per_page, with_category=True)


async def get_product(db: AsyncSession, product_id: int) -> ProductResponse:
    """Return *product_id* with its category, or raise ``NotFound``."""
    product = await repository.find_product(db, product_id, with_category=True)
    if product is None:
        raise NotFound()
    return product


async def create_product(
    db: AsyncSession, data: ProductIn | Mapping[str, Any]
) -> ProductResponse:
    attributes = await validate_product(db, data)

    async with transaction(db, CREATE_FAILED) as tx:
        product_id = await repository.create_product(tx, attributes)
    logger.info("Product %s created", product_id)

    with store_errors(CREATE_FAILED):
        product = await repository.find_product(db, product_id, with_category=True)
    if product is None:
        raise NotFound()
    return product


async def update_product(
    db: AsyncSession, product_id: int, data: ProductIn | Mapping[str, Any]
) -> ProductResponse:
    """
    Replace every writable attribute of *product_id*.

    A missing product is reported before the payload is validated, so a
    bad body against an unknown id yields 404 rather than 422.
    """
    if await repository.find_product(db, product_id) is None:
        raise NotFound()
    attributes = await validate_product(db, data)

    async with transaction(db, UPDATE_FAILED) as tx:
        # The row can disappear between the lookup and the write.
        if not await repository.update_product(tx, product_id, attributes):
            raise NotFound()
    logger.info("Product %s updated", product_id)

    with store_errors(UPDATE_FAILED):
        product = await repository.find_product(db, product_id, with_category=True)
    if product is None:
        raise NotFound()
    return product


async def delete_product(db: AsyncSession, product_id: int) -> None:
    if await repository.find_product(db, product_id) is None:
        raise NotFound()

    async with transaction(db, DELETE_FAILED) as tx:
        if not await repository.delete_product(tx, product_id):
            raise NotFound()
    logger.info("Product %s deleted", product_id)
