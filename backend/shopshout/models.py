from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, field_validator


# --- public.cleaned_products ---
# hash_id is the stable public identifier (UUID or short hash token).
# product_id is the upstream UUID, only selected by the product page lookup.
class ProductRecord(BaseModel):
    hash_id: Optional[str] = None
    product_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    description_english: Optional[str] = None
    price: Optional[float] = None
    sale_price: Optional[float] = None
    currency: Optional[str] = None
    image: Optional[str] = None
    brand: Optional[str] = None
    availability: Optional[str] = None
    updated_at: Optional[Union[datetime, str]] = None  # raw value kept; formatters fall back on bad input
    store_id: Optional[Any] = None
    status: Optional[str] = None
    store_name: Optional[str] = None  # joined from cleaned_stores.cleaned_name

    @field_validator("price", "sale_price", mode="before")
    @classmethod
    def _lenient_number(cls, value):
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("hash_id", "product_id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else None

    @property
    def has_discount(self) -> bool:
        return bool(self.sale_price and self.price and self.sale_price < self.price)

    @property
    def display_price(self) -> Optional[float]:
        if self.has_discount:
            return self.sale_price
        # A sale price without a list price is still the only price we have.
        return self.price or self.sale_price

    @property
    def currency_code(self) -> str:
        return self.currency or "EUR"


class PageEntry(BaseModel):
    loc: str
    priority: str
    changefreq: str


class ProductSeoMeta(BaseModel):
    title: str
    description: str
    canonical_url: str
    meta: Dict[str, str]  # name="..." tags (description, twitter:*)
    properties: Dict[str, str]  # property="..." tags (og:*, product:*)
    structured_data: Dict[str, Any]
