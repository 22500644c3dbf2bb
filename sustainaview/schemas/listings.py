"""Schemas for shopping search listings."""

from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from sustainaview.utils.identity import normalize_id, resolve_identity


class ProductListing(BaseModel):
    """A single shopping-search result for a suggested product.

    ``identity`` is resolved once, when the listing is built, so a cached
    listing keeps the same key for as long as it is re-rendered.
    """

    identity: str = ""
    product_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("product_id", "productId"))
    source_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("source_id", "id"))
    fallback_identity: bool = False

    name: str
    price: str = "Price not available"
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("image_url", "image"))
    source: str = "Unknown"
    url: str = "#"
    rating: str = "0"
    review_count: int = Field(default=0, validation_alias=AliasChoices("review_count", "reviews"))
    description: str = ""
    features: List[str] = Field(default_factory=list)
    shipping_text: str = Field(
        default="Shipping info not available", validation_alias=AliasChoices("shipping_text", "shipping")
    )
    in_stock: bool = Field(default=True, validation_alias=AliasChoices("in_stock", "inStock"))

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("product_id", "source_id", mode="before")
    @classmethod
    def _normalize_ids(cls, v):
        return normalize_id(v)

    @field_validator("rating", mode="before")
    @classmethod
    def _rating_as_text(cls, v):
        return "0" if v is None else str(v)

    @field_validator("review_count", mode="before")
    @classmethod
    def _review_count(cls, v):
        try:
            return int(v or 0)
        except (TypeError, ValueError):
            return 0

    @model_validator(mode="after")
    def _assign_identity(self) -> "ProductListing":
        if not self.identity:
            self.identity, self.fallback_identity = resolve_identity(
                self.product_id, self.source_id, source=self.source, name=self.name, url=self.url
            )
        return self

    @property
    def membership_keys(self) -> List[str]:
        """Every key under which this listing may appear in a wishlist."""
        keys = [self.identity]
        for key in (self.product_id, self.source_id):
            if key and key not in keys:
                keys.append(key)
        return keys


class SearchRequest(BaseModel):
    """Request body for the shopping search proxy."""

    query: str = ""
    location: Optional[str] = None
    num: Optional[int] = Field(default=None, ge=1, le=20)


class SearchResponse(BaseModel):
    """Normalized shopping search response."""

    success: bool
    results: List[ProductListing] = Field(default_factory=list)
    total_results: int = 0
    query: str
    location: str
    message: Optional[str] = None


def fallback_listing(product_name: str) -> ProductListing:
    """Static listing shown when the search returns nothing usable."""
    return ProductListing(
        name=product_name,
        price="$29.99",
        source="Amazon",
        url=f"https://www.amazon.com/s?k={quote_plus(product_name)}",
        rating="4.3",
        review_count=245,
        description=f"Sustainable {product_name.lower()} option",
        features=["Eco-Friendly", "Energy Efficient"],
        shipping_text="Free shipping",
        in_stock=True,
    )
