"""
Direct service-layer tests — exercises validation, the repository and the
product service without HTTP in between.
"""
import warnings
from decimal import Decimal

import pytest
from sqlalchemy.exc import SADeprecationWarning
from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.exceptions import NotFound, ValidationFailed
from app.models import Category
from app.schemas import ProductIn
from app.services import product_service
from app.validation import validate_product


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_category(db: AsyncSession, name: str = "Clothing") -> Category:
    category = Category(name=name)
    db.add(category)
    await db.commit()
    return category


def _raw(category_id: int, **overrides) -> dict:
    data = {
        "name": "Linen Shirt",
        "description": "Breathable summer shirt",
        "price": 45.5,
        "category_id": category_id,
        "image_url": "https://example.com/shirt.jpg",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_validate_product_normalizes(db_session: AsyncSession):
    category = await _create_category(db_session)
    attributes = await validate_product(
        db_session, _raw(category.id, name="  Linen Shirt  ", colour="blue")
    )
    assert set(attributes) == {"name", "description", "price", "category_id", "image_url"}
    assert attributes["name"] == "Linen Shirt"
    assert attributes["price"] == Decimal("45.5")


@pytest.mark.asyncio
async def test_validate_product_accepts_parsed_model(db_session: AsyncSession):
    category = await _create_category(db_session)
    attributes = await validate_product(db_session, ProductIn(**_raw(category.id)))
    assert attributes["category_id"] == category.id


@pytest.mark.asyncio
async def test_validate_product_reports_missing_fields(db_session: AsyncSession):
    with pytest.raises(ValidationFailed) as excinfo:
        await validate_product(db_session, {"description": "only this"})
    assert set(excinfo.value.errors) == {"name", "price", "category_id"}
    assert excinfo.value.status_code == 422


@pytest.mark.asyncio
async def test_validate_product_unknown_category(db_session: AsyncSession):
    with pytest.raises(ValidationFailed) as excinfo:
        await validate_product(db_session, _raw(category_id=777))
    assert list(excinfo.value.errors) == ["category_id"]


# ---------------------------------------------------------------------------
# repository
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_products_pagination_metadata(db_session: AsyncSession):
    page = await repository.list_products(db_session, page=3, per_page=10)
    assert page.total == 0
    assert page.data == []
    assert page.last_page == 1
    assert page.from_ is None and page.to is None


@pytest.mark.asyncio
async def test_find_product_without_category(db_session: AsyncSession):
    category = await _create_category(db_session)
    created = await product_service.create_product(db_session, _raw(category.id))
    db_session.expunge_all()

    bare = await repository.find_product(db_session, created.id)
    assert bare is not None
    assert bare.category is None

    joined = await repository.find_product(db_session, created.id, with_category=True)
    assert joined.category.name == "Clothing"


@pytest.mark.asyncio
async def test_relationship_loading_emits_no_deprecation(db_session: AsyncSession):
    """Default and explicit relationship loading stay warning-free."""
    category = await _create_category(db_session)
    created = await product_service.create_product(db_session, _raw(category.id))
    db_session.expunge_all()

    with warnings.catch_warnings():
        warnings.simplefilter("error", SADeprecationWarning)
        await repository.find_product(db_session, created.id)
        await repository.list_products(db_session, with_category=True)


# ---------------------------------------------------------------------------
# product_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_product_round_trip(db_session: AsyncSession):
    category = await _create_category(db_session)
    raw = _raw(category.id)
    product = await product_service.create_product(db_session, raw)

    for key, value in raw.items():
        assert getattr(product, key) == value
    assert product.category.id == category.id
    assert product.created_at is not None


@pytest.mark.asyncio
async def test_get_products_newest_first(db_session: AsyncSession):
    category = await _create_category(db_session)
    first = await product_service.create_product(db_session, _raw(category.id, name="Old"))
    second = await product_service.create_product(db_session, _raw(category.id, name="New"))

    page = await product_service.get_products(db_session, page=1, per_page=15)
    assert [p.id for p in page.data] == [second.id, first.id]
    assert page.to == 2


@pytest.mark.asyncio
async def test_get_product_not_found(db_session: AsyncSession):
    with pytest.raises(NotFound):
        await product_service.get_product(db_session, 99999)


@pytest.mark.asyncio
async def test_update_product_replaces_everything(db_session: AsyncSession):
    clothing = await _create_category(db_session)
    books = await _create_category(db_session, "Books")
    created = await product_service.create_product(db_session, _raw(clothing.id))

    updated = await product_service.update_product(
        db_session, created.id, {"name": "Atlas", "price": "12.00", "category_id": books.id}
    )
    assert updated.name == "Atlas"
    assert updated.price == 12.0
    assert updated.description is None
    assert updated.image_url is None
    assert updated.category.name == "Books"

    refetched = await product_service.get_product(db_session, created.id)
    assert refetched.model_dump(exclude={"updated_at"}) == updated.model_dump(exclude={"updated_at"})


@pytest.mark.asyncio
async def test_update_missing_product_checked_before_payload(db_session: AsyncSession):
    with pytest.raises(NotFound):
        await product_service.update_product(db_session, 99999, {})


@pytest.mark.asyncio
async def test_delete_product_via_service(db_session: AsyncSession):
    category = await _create_category(db_session)
    created = await product_service.create_product(db_session, _raw(category.id))

    await product_service.delete_product(db_session, created.id)
    with pytest.raises(NotFound):
        await product_service.get_product(db_session, created.id)


@pytest.mark.asyncio
async def test_delete_missing_product(db_session: AsyncSession):
    with pytest.raises(NotFound):
        await product_service.delete_product(db_session, 99999)
