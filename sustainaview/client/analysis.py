"""Room analysis collaborator."""

import logging

from sustainaview.client.api import SustainaViewClient
from sustainaview.schemas.analysis import RoomAnalysis, fallback_room_analysis

logger = logging.getLogger(__name__)


class RoomAnalyzer:
    def __init__(self, api: SustainaViewClient):
        self.api = api

    async def analyze(self, photo_base64: str, mime_type: str = "image/jpeg") -> RoomAnalysis:
        """Analyze a photo once; any failure yields the static fallback analysis."""
        result = await self.api.analyze_room(photo_base64, mime_type=mime_type)
        if result.success and result.data is not None:
            return result.data

        logger.warning(f"Room analysis unavailable ({result.error}); using fallback analysis")
        return fallback_room_analysis()
