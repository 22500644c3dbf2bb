"""API endpoints for the user's wishlist."""

import logging

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, status

from sustainaview.auth import current_active_user
from sustainaview.schemas.users import User
from sustainaview.schemas.wishlist import (
    WishlistDocument,
    WishlistItemCreate,
    WishlistItemResponse,
    WishlistItemUpdate,
    WishlistRead,
    WishlistResponse,
    WishlistUpdate,
)
from sustainaview.services import wishlist as wishlist_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/wishlist",
    tags=["wishlist"],
    dependencies=[Depends(current_active_user)],  # Protect all routes in this router
)


def _user_id(user: User) -> PydanticObjectId:
    if user.id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User ID is missing for authenticated user",
        )
    return user.id


def _read(wishlist: WishlistDocument) -> WishlistRead:
    return WishlistRead.model_validate(wishlist.model_dump())


async def _existing_wishlist(user: User) -> WishlistDocument:
    wishlist = await wishlist_service.get_wishlist(_user_id(user))
    if not wishlist:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wishlist not found")
    return wishlist


@router.get("", response_model=WishlistRead)
async def get_wishlist(user: User = Depends(current_active_user)) -> WishlistRead:
    """Get the current user's wishlist, creating an empty one on first use."""
    wishlist = await wishlist_service.get_or_create_wishlist(_user_id(user))
    return _read(wishlist)


@router.put("", response_model=WishlistResponse)
async def update_wishlist(
    update_data: WishlistUpdate,
    user: User = Depends(current_active_user),
) -> WishlistResponse:
    """Update wishlist metadata."""
    wishlist = await wishlist_service.update_wishlist(_user_id(user), update_data)
    return WishlistResponse(message="Wishlist updated", wishlist=_read(wishlist))


@router.delete("", response_model=WishlistResponse)
async def clear_wishlist(user: User = Depends(current_active_user)) -> WishlistResponse:
    """Remove every item from the wishlist."""
    wishlist = await wishlist_service.clear_wishlist(_user_id(user))
    if not wishlist:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wishlist not found")
    return WishlistResponse(message="Wishlist cleared", wishlist=_read(wishlist))


@router.post("/items", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED)
async def add_wishlist_item(
    item_data: WishlistItemCreate,
    user: User = Depends(current_active_user),
) -> WishlistResponse:
    """Add an item; re-adding the same product id refreshes it in place."""
    wishlist, _, created = await wishlist_service.add_item(_user_id(user), item_data)
    message = "Item added to wishlist" if created else "Item updated in wishlist"
    return WishlistResponse(message=message, wishlist=_read(wishlist))


@router.get("/items/{product_id}", response_model=WishlistItemResponse)
async def get_wishlist_item(
    product_id: str,
    user: User = Depends(current_active_user),
) -> WishlistItemResponse:
    wishlist = await _existing_wishlist(user)
    item = wishlist_service.find_item(wishlist.items, product_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found in wishlist")
    return WishlistItemResponse(item=item)


@router.put("/items/{product_id}", response_model=WishlistItemResponse)
async def update_wishlist_item(
    product_id: str,
    update_data: WishlistItemUpdate,
    user: User = Depends(current_active_user),
) -> WishlistItemResponse:
    """Update an item in place (notes, category, price...)."""
    wishlist = await _existing_wishlist(user)
    item = await wishlist_service.update_item(wishlist, product_id, update_data)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found in wishlist")
    return WishlistItemResponse(item=item)


@router.delete("/items/{product_id}", response_model=WishlistResponse)
async def remove_wishlist_item(
    product_id: str,
    user: User = Depends(current_active_user),
) -> WishlistResponse:
    wishlist = await _existing_wishlist(user)
    item = await wishlist_service.delete_item(wishlist, product_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found in wishlist")
    return WishlistResponse(message="Item removed from wishlist", wishlist=_read(wishlist))
