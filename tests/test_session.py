"""
Tests for client/session.py, client/analysis.py and client/products.py.

Covers:
  - RoomSession.start(): fallback analysis, per-photo reset, new selector
  - ProductFinder: query building, fallback listing, search URLs
"""
from __future__ import annotations

from datetime import datetime

import pytest
from beanie import PydanticObjectId

from sustainaview.client.analysis import RoomAnalyzer
from sustainaview.client.api import ServiceResult
from sustainaview.client.products import ProductFinder, build_query, search_urls
from sustainaview.client.session import CapturedPhoto, RoomSession
from sustainaview.schemas.analysis import ProductSuggestion, RoomAnalysis
from sustainaview.schemas.listings import ProductListing, SearchResponse
from sustainaview.schemas.wishlist import WishlistRead


def analysis_with(*names: str) -> RoomAnalysis:
    return RoomAnalysis(analysis="room", products=[ProductSuggestion(name=n, search_keywords=["eco"]) for n in names])


# ── analysis ───────────────────────────────────────────────────────────────────

class TestRoomAnalyzer:
    @pytest.mark.asyncio
    async def test_returns_server_analysis(self, api):
        api.analyze_room.return_value = ServiceResult.ok(analysis_with("Plant"))
        analysis = await RoomAnalyzer(api).analyze("cGhvdG8=")
        assert analysis.products[0].name == "Plant"

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self, api):
        api.analyze_room.return_value = ServiceResult.fail("Request timed out")
        analysis = await RoomAnalyzer(api).analyze("cGhvdG8=")
        assert analysis.is_fallback is True
        assert len(analysis.products) == 5


# ── products ───────────────────────────────────────────────────────────────────

class TestProductFinder:
    def test_build_query(self):
        assert build_query(["led bulbs", "smart lighting", "extra"], "LED Bulbs") == "led bulbs smart lighting"
        assert build_query([], "LED Bulbs") == "LED Bulbs"
        assert build_query(["  "], "LED Bulbs") == "LED Bulbs"

    def test_search_urls(self):
        urls = search_urls(["led", "bulbs"])
        assert set(urls) == {"amazon", "ebay", "etsy", "google", "craigslist"}
        assert urls["amazon"] == "https://amazon.com/s?k=led%20bulbs"
        assert urls["google"].endswith("+buy")

    @pytest.mark.asyncio
    async def test_results_truncated(self, api):
        listings = [ProductListing(product_id=str(i), name=f"Bulb {i}") for i in range(5)]
        api.search_products.return_value = ServiceResult.ok(
            SearchResponse(success=True, results=listings, query="q", location="United States")
        )
        found = await ProductFinder(api, num=3).search_listings(["led"], "Bulb")
        assert [listing.identity for listing in found] == ["0", "1", "2"]
        api.search_products.assert_awaited_once_with("led", location="United States", num=3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "result",
        [
            ServiceResult.fail("Network error occurred"),
            ServiceResult.ok(SearchResponse(success=False, query="q", location="United States")),
        ],
    )
    async def test_empty_or_error_gives_fallback_listing(self, api, result):
        api.search_products.return_value = result
        found = await ProductFinder(api).search_listings(["led"], "Bulb")
        assert len(found) == 1
        assert found[0].name == "Bulb"
        assert found[0].price == "$29.99"


# ── session ────────────────────────────────────────────────────────────────────

class TestRoomSession:
    @pytest.mark.asyncio
    async def test_start_builds_per_photo_state(self, api):
        api.analyze_room.return_value = ServiceResult.ok(analysis_with("Plant", "LED Bulbs"))
        session = RoomSession(api)

        analysis = await session.start(CapturedPhoto(uri="file:///room1.jpg", base64="cGhvdG8="))

        assert session.analysis is analysis
        assert session.listings.keys == ["plant", "led-bulbs"]
        assert session.selector.keys == ["plant", "led-bulbs"]
        assert session.selector.photo_base64 == "cGhvdG8="

    @pytest.mark.asyncio
    async def test_new_photo_resets_listings_but_not_wishlist(self, api):
        api.analyze_room.return_value = ServiceResult.ok(analysis_with("Plant"))
        api.search_products.return_value = ServiceResult.ok(
            SearchResponse(success=True, results=[ProductListing(name="Pot")], query="eco", location="United States")
        )
        api.add_to_wishlist.return_value = ServiceResult.ok()
        session = RoomSession(api)

        await session.start(CapturedPhoto(uri="file:///room1.jpg", base64="cGhvdG8="))
        listings = await session.listings.request_listings("plant")
        await session.reconciler.add(listings[0])
        assert session.listings.is_fetched("plant")

        await session.start(CapturedPhoto(uri="file:///room2.jpg", base64="b3RoZXI="))

        assert not session.listings.is_fetched("plant")
        assert session.reconciler.is_saved(listings[0])
        assert session.selector.photo_base64 == "b3RoZXI="

    @pytest.mark.asyncio
    async def test_fetched_session_identities_survive_reload(self, api):
        fallback = ProductListing(name="Pot")
        api.analyze_room.return_value = ServiceResult.ok(analysis_with("Plant"))
        api.search_products.return_value = ServiceResult.ok(
            SearchResponse(success=True, results=[fallback], query="eco", location="United States")
        )
        session = RoomSession(api)
        await session.start(CapturedPhoto(uri="file:///room1.jpg", base64="cGhvdG8="))
        await session.listings.request_listings("plant")

        api.get_wishlist.return_value = ServiceResult.ok(
            WishlistRead.model_validate(
                {
                    "id": PydanticObjectId(),
                    "user_id": PydanticObjectId(),
                    "items": [{"productId": fallback.identity, "name": "Pot", "price": "$5"}],
                    "created_at": datetime(2025, 1, 1),
                    "updated_at": datetime(2025, 1, 1),
                }
            )
        )
        await session.reconciler.load()
        assert session.reconciler.is_saved(fallback)

    def test_analysis_key_depends_on_uri(self):
        a = CapturedPhoto(uri="file:///a.jpg", base64="x")
        b = CapturedPhoto(uri="file:///b.jpg", base64="x")
        assert a.analysis_key != b.analysis_key
        assert a.analysis_key == CapturedPhoto(uri="file:///a.jpg", base64="y").analysis_key
