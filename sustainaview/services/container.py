"""Service objects shared by the routers for the lifetime of the app."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from sustainaview.ai.providers.base import BaseProvider
from sustainaview.ai.providers.factory import create_provider
from sustainaview.services.analysis import RoomAnalysisService
from sustainaview.services.image_storage import ImageStorage
from sustainaview.services.shopping import ShoppingSearchService
from sustainaview.services.visualization import RoomVisualizationService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    shopping: ShoppingSearchService
    analysis: RoomAnalysisService
    visualization: RoomVisualizationService
    storage: ImageStorage

    async def aclose(self) -> None:
        await self.shopping.aclose()


def build_services(provider: Optional[BaseProvider] = None) -> ServiceContainer:
    """Create the service objects once, at startup."""
    provider = provider or create_provider()
    logger.info(f"Using AI provider '{provider.provider}' ({provider.default_model}, {provider.image_model})")
    return ServiceContainer(
        shopping=ShoppingSearchService(),
        analysis=RoomAnalysisService(provider),
        visualization=RoomVisualizationService(provider),
        storage=ImageStorage(),
    )


def get_services(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the container stored on ``app.state``."""
    return request.app.state.services
