"""Base classes for AI providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

class BaseProvider(ABC):
    """Base class for AI providers."""

    def __init__(self, default_model: Optional[str] = None, image_model: Optional[str] = None):
        """Initialize the provider.

        Args:
            default_model: Model used for text and JSON generation.
            image_model: Model used for image generation.
        """
        self.logger = logging.getLogger(__name__)
        self._default_model = default_model
        self._image_model = image_model
        self.provider = "base"

    @property
    def default_model(self) -> Optional[str]:
        """Get the default model for this provider."""
        return self._default_model

    @property
    def image_model(self) -> Optional[str]:
        return self._image_model

    @abstractmethod
    async def generate_json(
        self,
        prompt: str,
        image: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
    ) -> Dict[str, Any]:
        """Generate a JSON object, optionally grounded on an image.

        Raises:
            ProviderError: If generation fails
            InvalidResponseError: If the answer is not a JSON object
            RateLimitError: If rate limit is exceeded
        """
        pass

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        image: bytes,
        mime_type: str = "image/jpeg",
    ) -> Tuple[str, bytes]:
        """Generate an edited version of ``image``.

        Returns:
            Tuple of (mime type, raw image bytes)

        Raises:
            ProviderError: If no image was produced
            RateLimitError: If rate limit is exceeded
        """
        pass
