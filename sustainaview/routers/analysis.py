"""Room analysis and visualization endpoints."""

import logging

from fastapi import APIRouter, Depends

from sustainaview.schemas.analysis import AnalysisRequest, RoomAnalysis
from sustainaview.schemas.visualization import VisualizationRequest, VisualizationResult
from sustainaview.services.container import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/analysis/room", response_model=RoomAnalysis)
async def analyze_room(
    request: AnalysisRequest,
    services: ServiceContainer = Depends(get_services),
) -> RoomAnalysis:
    """Analyze a room photo. Model failures degrade to a fallback analysis."""
    return await services.analysis.analyze(request.image_base64, mime_type=request.mime_type)


@router.post("/visualization", response_model=VisualizationResult)
async def generate_visualization(
    request: VisualizationRequest,
    services: ServiceContainer = Depends(get_services),
) -> VisualizationResult:
    """Render the room with the selected products applied."""
    return await services.visualization.generate(
        request.products, request.image_base64, mime_type=request.mime_type
    )
