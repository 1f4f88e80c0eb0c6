"""
Product repository — every SQL statement the catalog issues lives here.

Reads take the request's ``AsyncSession`` and return plain response models;
ORM instances never leave this module.  Mutations take a
``app.transactions.Transaction`` so they can only run inside a unit of work,
and they flush but never commit.

The related Category is loaded only when a read asks for it with
``with_category=True`` (relationships are ``lazy="noload"`` otherwise).
"""
import math
from decimal import Decimal
from typing import Any, Mapping

from sqlalchemy import desc, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.models import Category, Product
from app.schemas import ProductPage, ProductResponse
from app.transactions import Transaction

# Columns a client may write; everything else is store-managed.
WRITABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "description", "price", "category_id", "image_url"}
)


def _writable(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Full replacement: every writable field is set, missing ones to None."""
    values = {field: attributes.get(field) for field in WRITABLE_FIELDS}
    if values["price"] is not None and not isinstance(values["price"], Decimal):
        values["price"] = Decimal(str(values["price"]))
    return values


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def list_products(
    db: AsyncSession,
    page: int = 1,
    per_page: int = 15,
    with_category: bool = False,
) -> ProductPage:
    """
    Return one page of products, newest first.

    ``id`` breaks ties between rows created within the same timestamp tick.
    """
    total: int = (await db.execute(select(func.count()).select_from(Product))).scalar_one()

    offset = (page - 1) * per_page
    q = (
        select(Product)
        .order_by(desc(Product.created_at), desc(Product.id))
        .offset(offset)
        .limit(per_page)
    )
    if with_category:
        q = q.options(joinedload(Product.category))
    result = await db.execute(q)
    products = result.unique().scalars().all()

    items = [ProductResponse.model_validate(p) for p in products]
    return ProductPage(
        data=items,
        current_page=page,
        per_page=per_page,
        total=total,
        last_page=max(math.ceil(total / per_page), 1),
        from_=offset + 1 if items else None,
        to=offset + len(items) if items else None,
    )


async def find_product(
    db: AsyncSession, product_id: int, with_category: bool = False
) -> ProductResponse | None:
    """Return the product with *product_id*, or None when it does not exist."""
    q = (
        select(Product)
        .where(Product.id == product_id)
        # Reload store-generated columns (timestamps) on instances already
        # held by the session from an earlier write.
        .execution_options(populate_existing=True)
    )
    if with_category:
        q = q.options(joinedload(Product.category))
    result = await db.execute(q)
    product = result.unique().scalar_one_or_none()
    if product is None:
        return None
    return ProductResponse.model_validate(product)


async def category_exists(db: AsyncSession, category_id: int) -> bool:
    q = select(exists().where(Category.id == category_id))
    return bool((await db.execute(q)).scalar())


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def create_product(tx: Transaction, attributes: Mapping[str, Any]) -> int:
    """Insert a product and return its store-assigned id."""
    product = Product(**_writable(attributes))
    tx.session.add(product)
    await tx.session.flush()
    return product.id


async def update_product(
    tx: Transaction, product_id: int, attributes: Mapping[str, Any]
) -> bool:
    """
    Overwrite every writable column of *product_id*.

    Returns False when the product does not exist.
    """
    product = await tx.session.get(Product, product_id)
    if product is None:
        return False
    for field, value in _writable(attributes).items():
        setattr(product, field, value)
    await tx.session.flush()
    return True


async def delete_product(tx: Transaction, product_id: int) -> bool:
    """Delete *product_id*.  Returns False when the product does not exist."""
    product = await tx.session.get(Product, product_id)
    if product is None:
        return False
    await tx.session.delete(product)
    await tx.session.flush()
    return True
