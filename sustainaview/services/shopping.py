"""Shopping search proxy over SerpApi Google Shopping."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from sustainaview.config import FallbackIdentityMode, settings
from sustainaview.schemas.listings import ProductListing, SearchResponse
from sustainaview.utils.errors import ExternalServiceError, InvalidRequestError
from sustainaview.utils.identity import normalize_id, resolve_identity

logger = logging.getLogger(__name__)

# SerpApi "gl" country codes for the locations the app offers
COUNTRY_CODES: Dict[str, str] = {
    "United States": "us",
    "United Kingdom": "uk",
    "Canada": "ca",
    "Australia": "au",
    "Germany": "de",
    "France": "fr",
    "Spain": "es",
    "Italy": "it",
    "Japan": "jp",
    "India": "in",
    "Brazil": "br",
    "Mexico": "mx",
    "Netherlands": "nl",
    "Sweden": "se",
    "Norway": "no",
    "Denmark": "dk",
    "Finland": "fi",
}


def country_code(location: str) -> str:
    return COUNTRY_CODES.get(location, "us")


class ShoppingSearchService:
    """Thin async wrapper around the SerpApi Google Shopping engine."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        identity_mode: Optional[FallbackIdentityMode] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.search.serpapi_key.get_secret_value()
        self.base_url = base_url or settings.search.base_url
        self.timeout = timeout or settings.search.timeout
        self.identity_mode = identity_mode or settings.search.fallback_identity_mode
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _parse_result(self, item: Dict[str, Any]) -> ProductListing:
        """Normalize one ``shopping_results`` entry."""
        name = item.get("title") or "Unknown Product"
        source = item.get("source") or "Unknown"
        url = item.get("link") or item.get("product_link") or "#"

        identity, is_fallback = resolve_identity(
            None, item.get("product_id"), source=source, name=name, url=url, mode=self.identity_mode
        )
        extensions = item.get("extensions") or []

        return ProductListing(
            identity=identity,
            source_id=normalize_id(item.get("product_id")),
            fallback_identity=is_fallback,
            name=name,
            price=item.get("price") or "Price not available",
            image_url=item.get("thumbnail"),
            source=source,
            url=url,
            rating=item.get("rating") or 0,
            review_count=item.get("reviews") or 0,
            description=item.get("snippet") or f"{name} from {source}",
            features=[str(ext) for ext in extensions][:3],
            shipping_text=item.get("delivery") or "Shipping info not available",
            in_stock=True,
        )

    async def search(self, query: str, location: Optional[str] = None, num: Optional[int] = None) -> SearchResponse:
        """Search Google Shopping for ``query``.

        Raises:
            InvalidRequestError: If the query is empty
            ExternalServiceError: If SerpApi fails or is not configured
        """
        query = (query or "").strip()
        if not query:
            raise InvalidRequestError("Search query is required")

        location = location or settings.search.default_location
        num = num or settings.search.max_results

        if not self.api_key:
            raise ExternalServiceError("serpapi", "Shopping search is not configured")

        params = {
            "engine": "google_shopping",
            "q": query,
            "api_key": self.api_key,
            "num": num,
            "location": location,
            "hl": "en",
            "gl": country_code(location),
        }

        logger.info(f"Searching products for '{query}' in {location}")
        try:
            response = await self._client.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"SerpApi returned {e.response.status_code} for '{query}'")
            raise ExternalServiceError(
                "serpapi", "Failed to fetch products", details={"status_code": e.response.status_code}
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"SerpApi request failed for '{query}': {e}")
            raise ExternalServiceError("serpapi", "Failed to fetch products") from e

        if payload.get("error"):
            logger.warning(f"SerpApi error for '{query}': {payload['error']}")

        raw_results: List[Dict[str, Any]] = payload.get("shopping_results") or []
        if not raw_results:
            logger.info(f"No products found for '{query}'")
            return SearchResponse(
                success=False,
                results=[],
                query=query,
                location=location,
                message="No products found for this search",
            )

        results = [self._parse_result(item) for item in raw_results[:num]]
        logger.info(f"Found {len(results)} products for '{query}'")
        return SearchResponse(
            success=True,
            results=results,
            total_results=len(raw_results),
            query=query,
            location=location,
        )
