"""HTTP client for the SustainaView server.

Every call returns a ``ServiceResult``; transport, auth and server failures
are turned into a readable ``error`` instead of being raised.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar
from urllib.parse import quote

import httpx

from sustainaview.client.config import ClientSettings
from sustainaview.schemas.analysis import ProductSuggestion, RoomAnalysis
from sustainaview.schemas.greenovations import GreenovationRead
from sustainaview.schemas.listings import ProductListing, SearchResponse
from sustainaview.schemas.visualization import GeneratedImage, VisualizationResult
from sustainaview.schemas.wishlist import NOTES_MAX_LENGTH, WishlistItem, WishlistRead

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_AUTHENTICATED = "Not authenticated"
TIMED_OUT = "Request timed out"
NETWORK_ERROR = "Network error occurred"


@dataclass
class ServiceResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    auth_required: bool = False

    @classmethod
    def ok(cls, data: Optional[T] = None, status_code: Optional[int] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(cls, error: str, status_code: Optional[int] = None, auth_required: bool = False) -> "ServiceResult[T]":
        return cls(success=False, error=error, status_code=status_code, auth_required=auth_required)


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get("message"), str):
            return body["message"]
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list) and detail and isinstance(detail[0], dict) and "msg" in detail[0]:
            return str(detail[0]["msg"])
    return f"Request failed with status {response.status_code}"


def wishlist_payload(
    listing: ProductListing, search_keywords: Sequence[str] = (), category: Optional[str] = None
) -> Dict[str, Any]:
    """Build the add-to-wishlist body for a listing."""
    payload: Dict[str, Any] = {
        "product_id": listing.identity,
        "source_id": listing.source_id,
        "name": listing.name,
        "price": listing.price,
        "image_url": listing.image_url,
        "source": listing.source,
        "url": listing.url,
        "rating": listing.rating,
        "review_count": listing.review_count,
        "description": listing.description,
        "features": list(listing.features),
        "shipping_text": listing.shipping_text,
        "in_stock": listing.in_stock,
        "search_keywords": list(search_keywords),
    }
    if category:
        payload["category"] = category
    return payload


class SustainaViewClient:
    """Holds the auth token and HTTP session for one user of the app."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or ClientSettings()
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=self.settings.server_url,
            timeout=self.settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SustainaViewClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        parse: Optional[Callable[[Any], Any]] = None,
        auth: bool = True,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> ServiceResult:
        headers: Dict[str, str] = {}
        if auth:
            if not self.token:
                return ServiceResult.fail(NOT_AUTHENTICATED, status_code=401, auth_required=True)
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._http.request(
                method, path, headers=headers, timeout=timeout or self.settings.request_timeout, **kwargs
            )
        except httpx.TimeoutException:
            logger.warning(f"{method} {path} timed out")
            return ServiceResult.fail(TIMED_OUT)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            return ServiceResult.fail(NETWORK_ERROR)

        if response.status_code == 401:
            return ServiceResult.fail(NOT_AUTHENTICATED, status_code=401, auth_required=True)
        if response.is_error:
            message = _error_message(response)
            logger.info(f"{method} {path} returned {response.status_code}: {message}")
            return ServiceResult.fail(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return ServiceResult.ok(status_code=response.status_code)

        try:
            body = response.json()
            data = parse(body) if parse else body
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"{method} {path} returned an unexpected body: {e}")
            return ServiceResult.fail("Unexpected response from server", status_code=response.status_code)
        return ServiceResult.ok(data, status_code=response.status_code)

    # ── auth ──

    async def login(self, email: str, password: str) -> ServiceResult[str]:
        """Log in and keep the bearer token on this client."""
        result = await self._request(
            "POST",
            "/api/auth/jwt/login",
            auth=False,
            data={"username": email, "password": password},
            parse=lambda body: body["access_token"],
        )
        if result.success:
            self.token = result.data
        return result

    async def register(self, email: str, password: str) -> ServiceResult[Dict[str, Any]]:
        return await self._request(
            "POST", "/api/auth/register", auth=False, json={"email": email, "password": password}
        )

    async def logout(self) -> ServiceResult[None]:
        if not self.token:
            return ServiceResult.ok()
        result = await self._request("POST", "/api/auth/jwt/logout")
        self.token = None
        return result

    # ── analysis ──

    async def analyze_room(self, image_base64: str, mime_type: str = "image/jpeg") -> ServiceResult[RoomAnalysis]:
        return await self._request(
            "POST",
            "/api/analysis/room",
            auth=False,
            timeout=self.settings.analysis_timeout,
            json={"image_base64": image_base64, "mime_type": mime_type},
            parse=RoomAnalysis.model_validate,
        )

    async def search_products(
        self, query: str, location: Optional[str] = None, num: Optional[int] = None
    ) -> ServiceResult[SearchResponse]:
        return await self._request(
            "POST",
            "/api/search-products",
            auth=False,
            json={
                "query": query,
                "location": location or self.settings.search_location,
                "num": num or self.settings.search_results,
            },
            parse=SearchResponse.model_validate,
        )

    async def generate_visualization(
        self,
        products: Sequence[ProductSuggestion],
        image_base64: str,
        mime_type: str = "image/jpeg",
        timeout: Optional[float] = None,
    ) -> ServiceResult[GeneratedImage]:
        """Generate an "after" image; ``data`` is the image on success."""
        result = await self._request(
            "POST",
            "/api/visualization",
            auth=False,
            timeout=timeout or self.settings.generation_timeout,
            json={
                "products": [p.model_dump() for p in products],
                "image_base64": image_base64,
                "mime_type": mime_type,
            },
            parse=VisualizationResult.model_validate,
        )
        if not result.success:
            return result

        visualization: VisualizationResult = result.data
        image = visualization.image
        if image is None:
            return ServiceResult.fail(visualization.error or "Failed to generate visualization")
        return ServiceResult.ok(image, status_code=result.status_code)

    # ── wishlist ──

    async def get_wishlist(self) -> ServiceResult[WishlistRead]:
        return await self._request("GET", "/api/wishlist", parse=WishlistRead.model_validate)

    async def add_to_wishlist(
        self, listing: ProductListing, search_keywords: Sequence[str] = (), category: Optional[str] = None
    ) -> ServiceResult[WishlistRead]:
        result = await self._request(
            "POST",
            "/api/wishlist/items",
            json=wishlist_payload(listing, search_keywords, category),
            parse=lambda body: WishlistRead.model_validate(body["wishlist"]),
        )
        if result.success:
            logger.info(f"Saved {listing.identity} to wishlist")
        return result

    async def remove_from_wishlist(self, product_id: str) -> ServiceResult[WishlistRead]:
        return await self._request(
            "DELETE",
            f"/api/wishlist/items/{quote(product_id, safe='')}",
            parse=lambda body: WishlistRead.model_validate(body["wishlist"]),
        )

    async def update_item_notes(self, product_id: str, notes: str) -> ServiceResult[WishlistItem]:
        if len(notes) > NOTES_MAX_LENGTH:
            return ServiceResult.fail(f"Notes must be {NOTES_MAX_LENGTH} characters or less")
        return await self._request(
            "PUT",
            f"/api/wishlist/items/{quote(product_id, safe='')}",
            json={"notes": notes},
            parse=lambda body: WishlistItem.model_validate(body["item"]),
        )

    # ── greenovations ──

    async def get_greenovations(self) -> ServiceResult[List[GreenovationRead]]:
        return await self._request(
            "GET",
            "/api/greenovations",
            parse=lambda body: [GreenovationRead.model_validate(g) for g in body],
        )

    async def save_greenovation(
        self,
        original_image: str,
        generated_image: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult[GreenovationRead]:
        if not original_image or not generated_image:
            return ServiceResult.fail("Both original and generated images are required")
        return await self._request(
            "POST",
            "/api/greenovations",
            timeout=self.settings.generation_timeout,
            json={
                "name": name,
                "description": description,
                "notes": notes,
                "original_image": original_image,
                "generated_image": generated_image,
            },
            parse=GreenovationRead.model_validate,
        )

    async def update_greenovation(self, greenovation_id: str, **fields: Any) -> ServiceResult[GreenovationRead]:
        """Update name, description or notes."""
        return await self._request(
            "PATCH",
            f"/api/greenovations/{greenovation_id}",
            json={k: v for k, v in fields.items() if v is not None},
            parse=GreenovationRead.model_validate,
        )

    async def delete_greenovation(self, greenovation_id: str) -> ServiceResult[None]:
        return await self._request("DELETE", f"/api/greenovations/{greenovation_id}")

    async def refresh_greenovation_images(self, greenovation_id: str) -> ServiceResult[GreenovationRead]:
        return await self._request(
            "POST",
            f"/api/greenovations/{greenovation_id}/refresh",
            parse=GreenovationRead.model_validate,
        )
