"""Service layer for managing user wishlists.

A user has at most one wishlist, created on first use. Items are embedded in
the wishlist document and keyed by ``product_id``; an item's ``source_id`` is
accepted as an alias when looking it up.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from beanie import PydanticObjectId

from sustainaview.schemas.wishlist import (
    WishlistDocument,
    WishlistItem,
    WishlistItemCreate,
    WishlistItemUpdate,
    WishlistUpdate,
)

logger = logging.getLogger(__name__)


# ── item helpers (pure) ──


def find_item(items: List[WishlistItem], product_id: str) -> Optional[WishlistItem]:
    """Find an item by its product id, falling back to its source id."""
    for item in items:
        if item.product_id == product_id:
            return item
    for item in items:
        if item.source_id and item.source_id == product_id:
            return item
    return None


def upsert_item(
    items: List[WishlistItem], data: WishlistItemCreate, now: Optional[datetime] = None
) -> Tuple[WishlistItem, bool]:
    """Insert ``data`` or replace the item with the same product id in place.

    Returns:
        Tuple of (stored item, created)
    """
    now = now or datetime.utcnow()
    fields = data.model_dump()

    for index, existing in enumerate(items):
        if existing.product_id == data.product_id:
            updated = WishlistItem(**fields, created_at=existing.created_at, updated_at=now)
            items[index] = updated
            return updated, False

    item = WishlistItem(**fields, created_at=now, updated_at=now)
    items.append(item)
    return item, True


def remove_item(items: List[WishlistItem], product_id: str) -> Optional[WishlistItem]:
    item = find_item(items, product_id)
    if item is not None:
        items.remove(item)
    return item


def apply_item_update(
    items: List[WishlistItem], product_id: str, data: WishlistItemUpdate, now: Optional[datetime] = None
) -> Optional[WishlistItem]:
    """Apply the set fields of ``data`` to an item; returns None when absent."""
    item = find_item(items, product_id)
    if item is None:
        return None

    changes = data.model_dump(exclude_unset=True)
    updated = item.model_copy(update={**changes, "updated_at": now or datetime.utcnow()})
    items[items.index(item)] = updated
    return updated


# ── persistence ──


async def get_wishlist(user_id: PydanticObjectId) -> Optional[WishlistDocument]:
    """Retrieves the user's wishlist, if one exists."""
    return await WishlistDocument.find_one(WishlistDocument.user_id == user_id)


async def get_or_create_wishlist(user_id: PydanticObjectId) -> WishlistDocument:
    wishlist = await get_wishlist(user_id)
    if wishlist is None:
        wishlist = WishlistDocument(user_id=user_id)
        await wishlist.insert()
        logger.info(f"Created wishlist for user {user_id}")
    return wishlist


async def _touch_and_save(wishlist: WishlistDocument) -> WishlistDocument:
    wishlist.updated_at = datetime.utcnow()
    await wishlist.save()
    return wishlist


async def update_wishlist(user_id: PydanticObjectId, data: WishlistUpdate) -> WishlistDocument:
    """Updates wishlist metadata (name, description, tags, visibility)."""
    wishlist = await get_or_create_wishlist(user_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return wishlist  # No changes requested

    for field, value in update_data.items():
        setattr(wishlist, field, value)
    await _touch_and_save(wishlist)
    logger.info(f"Updated wishlist for user {user_id}: {sorted(update_data)}")
    return wishlist


async def clear_wishlist(user_id: PydanticObjectId) -> Optional[WishlistDocument]:
    """Removes every item from the user's wishlist; returns None when there is no wishlist."""
    wishlist = await get_wishlist(user_id)
    if wishlist is None:
        return None

    count = len(wishlist.items)
    wishlist.items = []
    await _touch_and_save(wishlist)
    logger.info(f"Cleared {count} items from wishlist of user {user_id}")
    return wishlist


async def add_item(
    user_id: PydanticObjectId, data: WishlistItemCreate
) -> Tuple[WishlistDocument, WishlistItem, bool]:
    """Adds an item, or refreshes it when the product id is already present."""
    wishlist = await get_or_create_wishlist(user_id)
    item, created = upsert_item(wishlist.items, data)
    await _touch_and_save(wishlist)

    action = "Added" if created else "Updated"
    logger.info(f"{action} item {item.product_id} in wishlist of user {user_id}")
    return wishlist, item, created


async def update_item(
    wishlist: WishlistDocument, product_id: str, data: WishlistItemUpdate
) -> Optional[WishlistItem]:
    item = apply_item_update(wishlist.items, product_id, data)
    if item is None:
        return None
    await _touch_and_save(wishlist)
    logger.info(f"Updated item {product_id} in wishlist {wishlist.id}")
    return item


async def delete_item(wishlist: WishlistDocument, product_id: str) -> Optional[WishlistItem]:
    item = remove_item(wishlist.items, product_id)
    if item is None:
        return None
    await _touch_and_save(wishlist)
    logger.info(f"Removed item {item.product_id} from wishlist {wishlist.id}")
    return item
