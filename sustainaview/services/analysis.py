"""Room sustainability analysis over a vision model."""

import base64
import binascii
import logging
from typing import Optional

from pydantic import ValidationError

from sustainaview.ai.prompts.room_analysis import RoomAnalysisPrompt
from sustainaview.ai.providers.base import BaseProvider
from sustainaview.schemas.analysis import RoomAnalysis, fallback_room_analysis, partial_room_analysis
from sustainaview.utils.errors import InvalidRequestError, InvalidResponseError, ProviderError

logger = logging.getLogger(__name__)


def decode_image(image_base64: str) -> bytes:
    """Decode a base64 payload, tolerating a ``data:`` URI prefix.

    Raises:
        InvalidRequestError: If the payload is not valid base64
    """
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]
    try:
        return base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequestError("Image payload is not valid base64") from e


class RoomAnalysisService:
    """Turns a room photo into a RoomAnalysis, degrading to static content."""

    def __init__(self, provider: BaseProvider, prompt: Optional[RoomAnalysisPrompt] = None):
        self.provider = provider
        self.prompt = prompt or RoomAnalysisPrompt()

    async def analyze(self, image_base64: str, mime_type: str = "image/jpeg") -> RoomAnalysis:
        """Analyze a room photo.

        Provider failures never propagate: unparseable output yields the partial
        fallback and any other failure yields the static fallback.

        Raises:
            InvalidRequestError: If the image payload cannot be decoded
        """
        image = decode_image(image_base64)

        try:
            data = await self.provider.generate_json(
                self.prompt.format(),
                image=image,
                mime_type=mime_type,
                system_prompt=self.prompt.system_prompt,
            )
            analysis = RoomAnalysis.model_validate(data)
        except InvalidResponseError as e:
            logger.warning(f"Room analysis response could not be parsed: {e.message}")
            return partial_room_analysis()
        except ValidationError as e:
            logger.warning(f"Room analysis response did not validate: {e.error_count()} errors")
            return partial_room_analysis()
        except ProviderError as e:
            logger.error(f"Room analysis failed: {e.message}")
            return fallback_room_analysis()

        logger.info(
            f"Room analysis produced {len(analysis.products)} products "
            f"(score {analysis.sustainability_score})"
        )
        return analysis
