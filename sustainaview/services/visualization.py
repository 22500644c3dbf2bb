"""Room visualization: render the room with the selected products."""

import base64
import logging
from typing import Optional, Sequence

from sustainaview.ai.prompts.visualization import RoomVisualizationPrompt
from sustainaview.ai.providers.base import BaseProvider
from sustainaview.schemas.analysis import ProductSuggestion
from sustainaview.schemas.visualization import VisualizationResult
from sustainaview.services.analysis import decode_image
from sustainaview.utils.errors import InvalidRequestError, ProviderError

logger = logging.getLogger(__name__)


class RoomVisualizationService:
    def __init__(self, provider: BaseProvider, prompt: Optional[RoomVisualizationPrompt] = None):
        self.provider = provider
        self.prompt = prompt or RoomVisualizationPrompt()

    async def generate(
        self,
        products: Sequence[ProductSuggestion],
        image_base64: str,
        mime_type: str = "image/jpeg",
    ) -> VisualizationResult:
        """Generate an "after" image of the room.

        Raises:
            InvalidRequestError: If no products were selected or the image is invalid
        """
        if not products:
            raise InvalidRequestError("Please select at least one product to visualize.")

        image = decode_image(image_base64)
        names = ", ".join(p.name for p in products)
        logger.info(f"Generating visualization with {len(products)} products: {names}")

        try:
            out_mime, data = await self.provider.generate_image(
                self.prompt.format(products), image=image, mime_type=mime_type
            )
        except ProviderError as e:
            logger.error(f"Visualization failed: {e.message}")
            return VisualizationResult(success=False, error=e.message)

        return VisualizationResult(
            success=True,
            mime_type=out_mime,
            data=base64.b64encode(data).decode("ascii"),
        )
