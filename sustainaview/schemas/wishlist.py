"""Schema definitions for user wishlists."""

from datetime import datetime
from typing import List, Optional

from beanie import Document, PydanticObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

from sustainaview.utils.identity import normalize_id

NOTES_MAX_LENGTH = 500


class WishlistItemBase(BaseModel):
    """Fields shared by stored wishlist items and add requests."""

    product_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("product_id", "productId"),
        description="Listing identity; the authoritative membership key",
    )
    source_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("source_id", "id"),
        description="Id originally provided by the shopping source, if any",
    )
    name: str = Field(..., min_length=1)
    price: str = Field(..., min_length=1)
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
    search_keywords: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("search_keywords", "searchKeywords")
    )
    category: Optional[str] = "Sustainable Products"
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id_as_text(cls, v):
        return normalize_id(v) or ""

    @field_validator("source_id", mode="before")
    @classmethod
    def _source_id_as_text(cls, v):
        return normalize_id(v)

    @field_validator("rating", mode="before")
    @classmethod
    def _rating_as_text(cls, v):
        return "0" if v is None else str(v)


class WishlistItemCreate(WishlistItemBase):
    """Model for adding (or re-adding) an item to the wishlist."""

    pass


class WishlistItem(WishlistItemBase):
    """An item embedded in a wishlist document."""

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class WishlistItemUpdate(BaseModel):
    """Model for updating an item in place (e.g. notes, category)."""

    name: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)


class WishlistUpdate(BaseModel):
    """Model for updating wishlist metadata."""

    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class WishlistBase(BaseModel):
    name: str = Field(default="My Wishlist", max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    items: List[WishlistItem] = Field(default_factory=list)


class WishlistRead(WishlistBase):
    """Model for reading a wishlist, including ID and metadata."""

    id: PydanticObjectId = Field(..., validation_alias=AliasChoices("_id", "id"))
    user_id: PydanticObjectId
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @computed_field  # type: ignore[misc]
    @property
    def item_count(self) -> int:
        return len(self.items)


class WishlistResponse(BaseModel):
    """Wishlist plus a human-readable outcome message."""

    message: Optional[str] = None
    wishlist: WishlistRead


class WishlistItemResponse(BaseModel):
    item: WishlistItem


class WishlistDocument(Document, WishlistBase):
    """MongoDB document model for a user's wishlist."""

    user_id: PydanticObjectId
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "wishlists"
        indexes = [
            [("user_id", 1)],
            [("items.product_id", 1)],
            [("tags", 1)],
        ]
