import logging
from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.exceptions import ValidationFailed
from app.schemas import ProductIn

logger = logging.getLogger(__name__)


async def validate_product(db: AsyncSession, raw: ProductIn | Mapping[str, Any]) -> dict[str, Any]:
    """
    Check a create/update payload and return its normalized attributes.

    *raw* is either an already-parsed ``ProductIn`` (the router path) or a
    plain mapping.  The result always holds exactly the five writable fields.
    Raises ``ValidationFailed`` with per-field messages when the shape is
    wrong or ``category_id`` names no existing category.
    """
    if isinstance(raw, ProductIn):
        payload = raw
    else:
        try:
            payload = ProductIn.model_validate(raw)
        except ValidationError as exc:
            failure = ValidationFailed.from_pydantic(exc)
            logger.warning("Product payload rejected: %s", failure.errors)
            raise failure from exc

    if not await repository.category_exists(db, payload.category_id):
        logger.warning("Product payload rejected: unknown category_id=%s", payload.category_id)
        raise ValidationFailed({"category_id": ["The selected category id is invalid."]})

    return payload.model_dump()
