from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


# --- Category ---

class CategoryResponse(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


# --- Product ---

class ProductIn(BaseModel):
    """Body accepted by both create and update (full replacement)."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category_id: int
    image_url: str | None = Field(None, max_length=2048)

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str | None
    price: float
    category_id: int
    image_url: str | None
    created_at: datetime | None
    updated_at: datetime | None
    category: CategoryResponse | None = None
    model_config = ConfigDict(from_attributes=True)


# --- Pagination ---

class ProductPage(BaseModel):
    """One page of products, with length-aware paginator metadata."""

    data: list[ProductResponse]
    current_page: int
    per_page: int
    total: int
    last_page: int
    # 1-based positions of the first and last item on this page, or None when empty.
    from_: int | None = Field(None, serialization_alias="from")
    to: int | None = None
