"""
Tests for the pure item helpers in services/wishlist.py.

Covers:
  - upsert_item(): insert vs. in-place replace keeping created_at
  - find_item(): product id first, then source id alias
  - remove_item() / apply_item_update()
"""
from __future__ import annotations

from datetime import datetime

from sustainaview.schemas.wishlist import WishlistItem, WishlistItemCreate, WishlistItemUpdate
from sustainaview.services.wishlist import apply_item_update, find_item, remove_item, upsert_item

EARLIER = datetime(2025, 1, 1)
LATER = datetime(2025, 2, 1)


def make_create(product_id="5", source_id=None, **kwargs) -> WishlistItemCreate:
    fields = {"name": "LED Bulb", "price": "$5"}
    fields.update(kwargs)
    return WishlistItemCreate(product_id=product_id, source_id=source_id, **fields)


class TestUpsertItem:
    def test_insert(self):
        items = []
        item, created = upsert_item(items, make_create(), now=EARLIER)
        assert created is True
        assert items == [item]
        assert item.created_at == EARLIER

    def test_readd_updates_in_place(self):
        items = []
        upsert_item(items, make_create(price="$5"), now=EARLIER)
        item, created = upsert_item(items, make_create(price="$4"), now=LATER)

        assert created is False
        assert len(items) == 1
        assert item.price == "$4"
        assert item.created_at == EARLIER
        assert item.updated_at == LATER

    def test_distinct_products(self):
        items = []
        upsert_item(items, make_create("1"))
        upsert_item(items, make_create("2"))
        assert [i.product_id for i in items] == ["1", "2"]


class TestFindItem:
    def test_by_product_id_or_source_id(self):
        items = []
        upsert_item(items, make_create("5", source_id="7"))
        assert find_item(items, "5").product_id == "5"
        assert find_item(items, "7").product_id == "5"
        assert find_item(items, "9") is None

    def test_product_id_takes_precedence(self):
        items = []
        upsert_item(items, make_create("5", source_id="7"))
        upsert_item(items, make_create("7", name="Other"))
        assert find_item(items, "7").name == "Other"


class TestRemoveAndUpdate:
    def test_remove(self):
        items = []
        upsert_item(items, make_create("5", source_id="7"))
        removed = remove_item(items, "7")
        assert removed.product_id == "5"
        assert items == []
        assert remove_item(items, "5") is None

    def test_update_only_set_fields(self):
        items: list[WishlistItem] = []
        upsert_item(items, make_create("5", notes="old"), now=EARLIER)
        updated = apply_item_update(items, "5", WishlistItemUpdate(notes="  new note "), now=LATER)

        assert updated.notes == "new note"
        assert updated.price == "$5"
        assert updated.updated_at == LATER
        assert items[0] is updated

    def test_update_missing(self):
        assert apply_item_update([], "5", WishlistItemUpdate(notes="x")) is None
