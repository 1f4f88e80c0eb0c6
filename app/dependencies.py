from fastapi import Path, Query

from app.config import settings
from app.exceptions import NotFound

# Largest value a signed 64-bit INTEGER column (and LIMIT/OFFSET) can hold.
MAX_SQL_INTEGER = 2**63 - 1

# Keeps (page - 1) * PRODUCTS_PER_PAGE inside a 64-bit OFFSET.
MAX_PAGE = MAX_SQL_INTEGER // settings.PRODUCTS_PER_PAGE


class PageParams:
    """
    Reusable FastAPI dependency for the product listing's ``page`` query
    parameter.

    Usage in a router::

        @router.get("/products")
        async def list_products(paging: PageParams = Depends()):
            ...

    Attributes
    ----------
    page:
        1-based page number, between 1 and ``MAX_PAGE``.  Pages past the
        last one come back empty.
    per_page:
        Fixed page size taken from ``settings.PRODUCTS_PER_PAGE``; clients
        cannot change it.
    """

    def __init__(
        self,
        page: int = Query(
            1,
            ge=1,
            le=MAX_PAGE,
            description="Page number (1-based).",
        ),
    ) -> None:
        self.page = page
        self.per_page = settings.PRODUCTS_PER_PAGE


def product_id_path(
    product_id: str = Path(description="ID of the product."),
) -> int:
    """
    Bind the ``{product_id}`` path segment.

    Anything that cannot name a stored row (non-numeric, zero, or past the
    64-bit range) is reported as ``NotFound`` instead of reaching the store.
    """
    if not (product_id.isascii() and product_id.isdigit()):
        raise NotFound()
    value = int(product_id)
    if not 1 <= value <= MAX_SQL_INTEGER:
        raise NotFound()
    return value
