"""Capture → analysis pipeline for one room photo."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sustainaview.client.analysis import RoomAnalyzer
from sustainaview.client.api import SustainaViewClient
from sustainaview.client.listing_cache import ProductListingCache
from sustainaview.client.products import ProductFinder
from sustainaview.client.reconciler import WishlistReconciler
from sustainaview.client.selector import VisualizationSelector
from sustainaview.schemas.analysis import RoomAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedPhoto:
    """A photo as handed over by the camera or gallery."""

    uri: str
    base64: str
    mime_type: str = "image/jpeg"

    @property
    def analysis_key(self) -> str:
        return hashlib.sha1(self.uri.encode("utf-8")).hexdigest()[:16]


class RoomSession:
    """Wires the per-photo collaborators together.

    The wishlist reconciler outlives photos; the listing cache is reset and a
    new selector is built whenever a different photo is analyzed.
    """

    def __init__(
        self,
        api: SustainaViewClient,
        on_listing_change: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.analyzer = RoomAnalyzer(api)
        self.finder = ProductFinder(api)
        self.reconciler = WishlistReconciler(api)
        self.listings = ProductListingCache(
            self._fetch_listings, timeout=api.settings.listing_timeout, on_change=on_listing_change
        )

        self.photo: Optional[CapturedPhoto] = None
        self.analysis: Optional[RoomAnalysis] = None
        self.selector: Optional[VisualizationSelector] = None

    async def _fetch_listings(self, keywords, product_name):
        listings = await self.finder.search_listings(keywords, product_name)
        self.reconciler.track(listings)
        return listings

    async def start(self, photo: CapturedPhoto) -> RoomAnalysis:
        """Analyze ``photo`` (falling back to static content) and reset per-photo state."""
        self.photo = photo
        self.analysis = None
        self.selector = None
        self.listings.reset(photo.analysis_key)
        analysis = await self.analyzer.analyze(photo.base64, mime_type=photo.mime_type)

        if self.photo is not photo:
            # A newer photo was started while this one was being analyzed
            return analysis

        self.analysis = analysis
        if self.listings.load_analysis(analysis, photo.analysis_key):
            logger.info(f"New analysis session {photo.analysis_key} with {len(analysis.products)} products")
        self.selector = VisualizationSelector(self.api, analysis, photo.base64, mime_type=photo.mime_type)
        return analysis
