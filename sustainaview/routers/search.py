"""Shopping search proxy endpoint."""

import logging

from fastapi import APIRouter, Depends

from sustainaview.schemas.listings import SearchRequest, SearchResponse
from sustainaview.services.container import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search-products", response_model=SearchResponse)
async def search_products(
    request: SearchRequest,
    services: ServiceContainer = Depends(get_services),
) -> SearchResponse:
    """Search shopping listings for a product query.

    An empty query is rejected with 400; upstream failures surface as 502.
    """
    return await services.shopping.search(request.query, location=request.location, num=request.num)
