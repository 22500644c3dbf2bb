"""Google AI provider implementation."""

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional, Tuple

from google import genai
from google.genai import errors, types

from ...config import settings
from ...utils.errors import InvalidResponseError, ProviderError, RateLimitError
from ..prompts.base import Prompt
from .base import BaseProvider


class GoogleAIProvider(BaseProvider):
    """Provider for Google's Generative AI API (Gemini)."""

    def __init__(
        self,
        default_model: Optional[str] = None,
        image_model: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[genai.Client] = None,
    ):
        """Initialize the Google AI provider.

        Args:
            default_model: Model for text/JSON generation. Defaults to the configured analysis model.
            image_model: Model for image generation. Defaults to the configured image model.
            api_key: API key. Defaults to the configured key.
            timeout: Seconds before a single call is abandoned.
            client: Pre-built client, mainly for tests.
        """
        super().__init__(
            default_model=default_model or settings.ai.analysis_model,
            image_model=image_model or settings.ai.image_model,
        )
        self.provider = "google"
        self.timeout = timeout or settings.ai.request_timeout
        self.client = client or genai.Client(api_key=api_key or settings.ai.google_api_key.get_secret_value())
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _contents(prompt: str, image: Optional[bytes], mime_type: str) -> List[Any]:
        contents: List[Any] = []
        if image is not None:
            contents.append(types.Part.from_bytes(data=image, mime_type=mime_type))
        contents.append(prompt)
        return contents

    async def _generate(self, model: str, contents: List[Any], config: types.GenerateContentConfig):
        try:
            return await asyncio.wait_for(
                self.client.aio.models.generate_content(model=model, contents=contents, config=config),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderError(f"Google request timed out after {self.timeout}s")
        except errors.APIError as e:
            # Google's API returns 429 as RESOURCE_EXHAUSTED
            if e.code == 429:
                raise RateLimitError(self.provider, retry_after=60.0)
            raise ProviderError(f"Google error: {e.code} {e.message}") from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Google error: {str(e)}") from e

    async def generate_json(
        self,
        prompt: str,
        image: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
    ) -> Dict[str, Any]:
        """Generate a JSON response from the AI model."""
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_prompt,
            response_mime_type="application/json",
        )
        response = await self._generate(self._default_model, self._contents(prompt, image, mime_type), config)

        if not response.text:
            raise InvalidResponseError("Empty response from model")

        try:
            return Prompt.extract_json(response.text)
        except InvalidResponseError:
            self.logger.error(f"Couldn't parse JSON from model response: {response.text[:500]}")
            raise

    async def generate_image(
        self,
        prompt: str,
        image: bytes,
        mime_type: str = "image/jpeg",
    ) -> Tuple[str, bytes]:
        """Generate an edited room image."""
        config = types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"], temperature=0.3)
        response = await self._generate(self._image_model, self._contents(prompt, image, mime_type), config)

        for candidate in response.candidates or []:
            if not candidate.content or not candidate.content.parts:
                continue
            for part in candidate.content.parts:
                if part.inline_data and part.inline_data.data:
                    data = part.inline_data.data
                    # The SDK may hand back raw bytes or base64 text
                    if isinstance(data, str):
                        data = base64.b64decode(data)
                    return part.inline_data.mime_type or "image/png", data

        self.logger.warning(f"No image in model response; text: {(response.text or '')[:200]}")
        raise ProviderError("No image generated")
