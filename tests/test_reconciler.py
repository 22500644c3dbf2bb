"""
Tests for client/reconciler.py.

Covers:
  - load(): membership keyed by product_id and source_id, failure keeps state
  - session fallback identities from earlier sessions are not admitted
  - add(): already saved / pending guards, failure leaves state unchanged
  - remove(): uses the stored product id, erases every alias
  - interleavings: add/remove in flight, loads overlapping a mutation
"""
from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from beanie import PydanticObjectId

from sustainaview.client.api import ServiceResult
from sustainaview.client.reconciler import MutationStatus, WishlistReconciler
from sustainaview.schemas.listings import ProductListing
from sustainaview.schemas.wishlist import WishlistRead
from sustainaview.utils.identity import session_identity


def wishlist(*items: dict) -> WishlistRead:
    return WishlistRead.model_validate(
        {
            "id": PydanticObjectId(),
            "user_id": PydanticObjectId(),
            "items": [{"name": "Bulb", "price": "$5", **item} for item in items],
            "created_at": datetime(2025, 1, 1),
            "updated_at": datetime(2025, 1, 1),
        }
    )


def listing(product_id=None, source_id=None, name="Bulb") -> ProductListing:
    return ProductListing(product_id=product_id, source_id=source_id, name=name)


# ── load ───────────────────────────────────────────────────────────────────────

class TestLoad:
    @pytest.mark.asyncio
    async def test_product_and_source_ids_are_members(self, api):
        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": "5", "id": 7}))
        reconciler = WishlistReconciler(api)

        result = await reconciler.load()

        assert result.success is True
        assert reconciler.members == {"5", "7"}
        assert reconciler.is_saved(listing(source_id=7))
        assert reconciler.is_saved(listing(product_id="5"))

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_state(self, api):
        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": "5"}))
        reconciler = WishlistReconciler(api)
        await reconciler.load()

        api.get_wishlist.return_value = ServiceResult.fail("Network error occurred")
        result = await reconciler.load()

        assert result.success is False
        assert reconciler.members == {"5"}
        assert reconciler.last_error == "Network error occurred"

    @pytest.mark.asyncio
    async def test_foreign_session_identities_skipped(self, api):
        stale = session_identity()
        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": stale}, {"productId": "9"}))
        reconciler = WishlistReconciler(api)

        await reconciler.load()
        assert reconciler.members == {"9"}

    @pytest.mark.asyncio
    async def test_own_session_identities_kept(self, api):
        own = listing()
        reconciler = WishlistReconciler(api)
        reconciler.track([own])
        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": own.identity}))

        await reconciler.load()
        assert reconciler.is_saved(own)


# ── add / remove ───────────────────────────────────────────────────────────────

class TestMutations:
    @pytest.mark.asyncio
    async def test_add_then_remove(self, api):
        api.add_to_wishlist.return_value = ServiceResult.ok()
        api.remove_from_wishlist.return_value = ServiceResult.ok()
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5", source_id="7")

        added = await reconciler.add(item, search_keywords=["led"])
        assert added.status == MutationStatus.SAVED
        assert reconciler.members == {"5", "7"}

        removed = await reconciler.remove(item)
        assert removed.status == MutationStatus.REMOVED
        assert reconciler.members == frozenset()
        assert not reconciler.is_saved(item)

        api.add_to_wishlist.assert_awaited_once_with(item, search_keywords=["led"], category=None)
        api.remove_from_wishlist.assert_awaited_once_with("5")

    @pytest.mark.asyncio
    async def test_add_while_pending(self, api):
        release = asyncio.Event()

        async def slow_add(*args, **kwargs):
            await release.wait()
            return ServiceResult.ok()

        api.add_to_wishlist.side_effect = slow_add
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")

        first = asyncio.create_task(reconciler.add(item))
        await asyncio.sleep(0)
        assert reconciler.is_pending(item)

        second = await reconciler.add(item)
        assert second.status == MutationStatus.PENDING

        release.set()
        assert (await first).status == MutationStatus.SAVED
        assert (await reconciler.add(item)).status == MutationStatus.ALREADY_SAVED
        api.add_to_wishlist.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_failure_leaves_state(self, api):
        api.add_to_wishlist.return_value = ServiceResult.fail("Not authenticated", status_code=401, auth_required=True)
        reconciler = WishlistReconciler(api)

        result = await reconciler.add(listing(product_id="5"))

        assert result.status == MutationStatus.FAILED
        assert result.error == "Not authenticated"
        assert reconciler.members == frozenset()
        assert not reconciler.is_pending(listing(product_id="5"))

    @pytest.mark.asyncio
    async def test_remove_not_saved_is_noop(self, api):
        result = await WishlistReconciler(api).remove(listing(product_id="5"))
        assert result.status == MutationStatus.NOT_SAVED
        api.remove_from_wishlist.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_uses_stored_product_id(self, api):
        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": "5", "id": 7}))
        api.remove_from_wishlist.return_value = ServiceResult.ok()
        reconciler = WishlistReconciler(api)
        await reconciler.load()

        result = await reconciler.remove(listing(source_id=7))

        assert result.status == MutationStatus.REMOVED
        api.remove_from_wishlist.assert_awaited_once_with("5")
        assert reconciler.members == frozenset()

    @pytest.mark.asyncio
    async def test_remove_failure_keeps_membership(self, api):
        api.add_to_wishlist.return_value = ServiceResult.ok()
        api.remove_from_wishlist.return_value = ServiceResult.fail("Server error", status_code=500)
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")
        await reconciler.add(item)

        result = await reconciler.remove(item)

        assert result.status == MutationStatus.FAILED
        assert reconciler.is_saved(item)

    @pytest.mark.asyncio
    async def test_remove_already_gone_on_server(self, api):
        api.add_to_wishlist.return_value = ServiceResult.ok()
        api.remove_from_wishlist.return_value = ServiceResult.fail("Item not found in wishlist", status_code=404)
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")
        await reconciler.add(item)

        result = await reconciler.remove(item)

        assert result.status == MutationStatus.NOT_SAVED
        assert not reconciler.is_saved(item)


# ── interleavings ──────────────────────────────────────────────────────────────

class TestInterleavings:
    @pytest.mark.asyncio
    async def test_add_during_remove_is_pending(self, api):
        release = asyncio.Event()

        async def slow_remove(*args, **kwargs):
            await release.wait()
            return ServiceResult.ok()

        api.add_to_wishlist.return_value = ServiceResult.ok()
        api.remove_from_wishlist.side_effect = slow_remove
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")
        await reconciler.add(item)

        removing = asyncio.create_task(reconciler.remove(item))
        await asyncio.sleep(0)

        during = await reconciler.add(item)
        assert during.status == MutationStatus.PENDING
        assert during.success is False

        release.set()
        assert (await removing).status == MutationStatus.REMOVED
        assert not reconciler.is_saved(item)
        api.add_to_wishlist.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remove_during_add_is_pending(self, api):
        release = asyncio.Event()

        async def slow_add(*args, **kwargs):
            await release.wait()
            return ServiceResult.ok()

        api.add_to_wishlist.side_effect = slow_add
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")

        adding = asyncio.create_task(reconciler.add(item))
        await asyncio.sleep(0)

        assert (await reconciler.remove(item)).status == MutationStatus.PENDING
        release.set()
        assert (await adding).status == MutationStatus.SAVED
        api.remove_from_wishlist.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_load_does_not_resurrect_removed_item(self, api):
        release = asyncio.Event()
        stale = wishlist({"productId": "5"})

        async def slow_load(*args, **kwargs):
            await release.wait()
            return ServiceResult.ok(stale)

        api.add_to_wishlist.return_value = ServiceResult.ok()
        api.remove_from_wishlist.return_value = ServiceResult.ok()
        reconciler = WishlistReconciler(api)
        item = listing(product_id="5")
        await reconciler.add(item)

        api.get_wishlist.side_effect = slow_load
        loading = asyncio.create_task(reconciler.load())
        await asyncio.sleep(0)

        assert (await reconciler.remove(item)).status == MutationStatus.REMOVED
        release.set()
        await loading

        assert not reconciler.is_saved(item)

    @pytest.mark.asyncio
    async def test_quiet_load_still_applies(self, api):
        api.add_to_wishlist.return_value = ServiceResult.ok()
        reconciler = WishlistReconciler(api)
        await reconciler.add(listing(product_id="5"))

        api.get_wishlist.return_value = ServiceResult.ok(wishlist({"productId": "9"}))
        await reconciler.load()

        assert reconciler.members == {"9"}
