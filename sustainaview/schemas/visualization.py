"""Schemas for AI room visualization."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .analysis import ProductSuggestion


class GeneratedImage(BaseModel):
    """An encoded image returned by the image-generation model."""

    mime_type: str = "image/png"
    data: str = Field(..., description="Base64 encoded image bytes")

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class VisualizationRequest(BaseModel):
    """Selected products plus the original room photo."""

    products: List[ProductSuggestion] = Field(default_factory=list)
    image_base64: str = Field(..., min_length=1)
    mime_type: str = "image/jpeg"


class VisualizationResult(BaseModel):
    """Either an image or a structured failure reason."""

    success: bool
    mime_type: Optional[str] = None
    data: Optional[str] = None
    error: Optional[str] = None

    @property
    def image(self) -> Optional[GeneratedImage]:
        if not self.success or not self.data:
            return None
        return GeneratedImage(mime_type=self.mime_type or "image/png", data=self.data)
