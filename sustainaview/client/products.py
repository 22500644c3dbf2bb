"""Listing source for suggested products."""

import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from sustainaview.client.api import SustainaViewClient
from sustainaview.schemas.listings import ProductListing, fallback_listing

logger = logging.getLogger(__name__)


def build_query(keywords: Sequence[str], product_name: str, max_keywords: int = 2) -> str:
    """Search query from the first keywords, or the product name when there are none."""
    terms = [k.strip() for k in keywords if k and k.strip()][:max_keywords]
    return " ".join(terms) or product_name.strip()


def search_urls(keywords: Sequence[str]) -> Dict[str, str]:
    """Manual search links shown when no listings are available."""
    encoded = quote(" ".join(keywords), safe="")
    return {
        "amazon": f"https://amazon.com/s?k={encoded}",
        "ebay": f"https://ebay.com/sch/i.html?_nkw={encoded}",
        "etsy": f"https://etsy.com/search?q={encoded}",
        "google": f"https://google.com/search?q={encoded}+buy",
        "craigslist": f"https://craigslist.org/search/sss?query={encoded}",
    }


class ProductFinder:
    """Finds shopping listings for a product suggestion through the server proxy."""

    def __init__(self, api: SustainaViewClient, location: Optional[str] = None, num: Optional[int] = None):
        self.api = api
        self.location = location or api.settings.search_location
        self.num = num or api.settings.search_results

    async def search_listings(self, keywords: Sequence[str], product_name: str) -> List[ProductListing]:
        """Return up to ``num`` listings; an empty or failed search yields one fallback listing."""
        query = build_query(keywords, product_name)
        result = await self.api.search_products(query, location=self.location, num=self.num)

        if result.success and result.data is not None and result.data.results:
            return result.data.results[: self.num]

        if not result.success:
            logger.warning(f"Listing search for '{query}' failed: {result.error}")
        return [fallback_listing(product_name)]

    def search_urls(self, keywords: Sequence[str]) -> Dict[str, str]:
        return search_urls(keywords)
