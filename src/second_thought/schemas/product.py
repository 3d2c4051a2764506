"""Product models: raw scraped fields and the validated product record."""
from pydantic import Field

from second_thought.schemas.base import CamelModel, FrozenCamelModel


class ProductRecord(FrozenCamelModel):
    """Validated, normalized product as seen on a commerce page.

    A record needs a non-empty name, a positive price and a 3-letter currency
    code; at most five urgency indicators are kept.
    """

    name: str = Field(min_length=1, max_length=200)
    price: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    original_price: float | None = None
    category: str | None = None
    url: str
    image_url: str | None = None
    seller: str | None = None
    urgency_indicators: list[str] = Field(default_factory=list, max_length=5)


class RawProductFields(CamelModel):
    """Text fragments scraped from a product page (before parsing)."""

    url: str
    name: str | None = None
    price_text: str | None = None
    original_price_text: str | None = None
    urgency_texts: list[str] = Field(default_factory=list)
    category: str | None = None
    image_url: str | None = None
    seller: str | None = None
