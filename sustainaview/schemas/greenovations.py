"""Schema definitions for saved room transformations (greenovations)."""

from datetime import datetime
from typing import Optional

from beanie import Document, PydanticObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_DESCRIPTION = "AI-generated sustainable room makeover"


class GreenovationImages(BaseModel):
    """Signed references to the stored before/after images.

    The URLs are capabilities with a TTL; the keys are what the blob store
    needs to mint fresh ones.
    """

    original_image: str = Field(..., description="Signed URL for the original room photo")
    generated_image: str = Field(..., description="Signed URL for the AI-generated transformation")
    original_image_key: str
    generated_image_key: str
    original_image_expires_at: Optional[datetime] = None
    generated_image_expires_at: Optional[datetime] = None


class GreenovationCreate(BaseModel):
    """Request body for saving a before/after pair; images are base64 payloads."""

    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    original_image: str = Field(default="", validation_alias=AliasChoices("original_image", "originalImage"))
    generated_image: str = Field(default="", validation_alias=AliasChoices("generated_image", "generatedImage"))

    model_config = ConfigDict(populate_by_name=True)


class GreenovationUpdate(BaseModel):
    """Model for editing a greenovation's metadata."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    notes: Optional[str] = None


class GreenovationRead(GreenovationImages):
    """Model for reading greenovation data, including ID and metadata."""

    id: PydanticObjectId = Field(..., validation_alias=AliasChoices("_id", "id"))
    user_id: PydanticObjectId
    name: str
    description: str = DEFAULT_DESCRIPTION
    notes: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class GreenovationDocument(Document, GreenovationImages):
    """MongoDB document model for greenovations."""

    user_id: PydanticObjectId
    name: str = "Room Transformation"
    description: str = DEFAULT_DESCRIPTION
    notes: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "greenovations"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
        ]
