"""Service layer for saved room transformations (greenovations)."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from beanie import PydanticObjectId

from sustainaview.config import settings
from sustainaview.schemas.greenovations import (
    DEFAULT_DESCRIPTION,
    GreenovationCreate,
    GreenovationDocument,
    GreenovationImages,
    GreenovationUpdate,
)
from sustainaview.services.image_storage import ImageStorage
from sustainaview.utils.errors import InvalidRequestError, StorageError

logger = logging.getLogger(__name__)

IMAGE_SLOTS = ("original_image", "generated_image")


def needs_refresh(expires_at: Optional[datetime], now: datetime, margin: int) -> bool:
    """A reference without a known expiry is treated as expired."""
    return expires_at is None or expires_at - timedelta(seconds=margin) <= now


async def refresh_image_references(
    images: GreenovationImages,
    storage: ImageStorage,
    now: Optional[datetime] = None,
    margin: Optional[int] = None,
    force: bool = False,
) -> bool:
    """Re-sign expired image URLs in place.

    Returns:
        True if at least one reference was re-signed
    """
    now = now or datetime.utcnow()
    margin = settings.storage.signed_url_refresh_margin if margin is None else margin

    changed = False
    for slot in IMAGE_SLOTS:
        if not force and not needs_refresh(getattr(images, f"{slot}_expires_at"), now, margin):
            continue
        url, expires_at = await storage.sign(getattr(images, f"{slot}_key"))
        setattr(images, slot, url)
        setattr(images, f"{slot}_expires_at", expires_at)
        changed = True
    return changed


async def _refresh_and_save(greenovation: GreenovationDocument, storage: ImageStorage, force: bool = False) -> None:
    if await refresh_image_references(greenovation, storage, force=force):
        await greenovation.save()
        logger.debug(f"Re-signed image URLs for greenovation {greenovation.id}")


async def list_greenovations(user_id: PydanticObjectId, storage: ImageStorage) -> List[GreenovationDocument]:
    """Retrieves a user's greenovations, newest first."""
    greenovations = (
        await GreenovationDocument.find(GreenovationDocument.user_id == user_id)
        .sort(-GreenovationDocument.created_at)
        .to_list()
    )
    for greenovation in greenovations:
        try:
            await _refresh_and_save(greenovation, storage)
        except StorageError as e:
            # Keep listing; the stale URL can be re-signed through the refresh endpoint
            logger.warning(f"Could not re-sign images for greenovation {greenovation.id}: {e.message}")
    return greenovations


async def get_greenovation(
    greenovation_id: PydanticObjectId, user_id: PydanticObjectId
) -> Optional[GreenovationDocument]:
    """Retrieves a greenovation by its ID, ensuring it belongs to the user."""
    return await GreenovationDocument.find_one(
        GreenovationDocument.id == greenovation_id,
        GreenovationDocument.user_id == user_id,
    )


async def get_fresh_greenovation(
    greenovation_id: PydanticObjectId, user_id: PydanticObjectId, storage: ImageStorage, force: bool = False
) -> Optional[GreenovationDocument]:
    greenovation = await get_greenovation(greenovation_id, user_id)
    if greenovation is not None:
        await _refresh_and_save(greenovation, storage, force=force)
    return greenovation


async def create_greenovation(
    user_id: PydanticObjectId, data: GreenovationCreate, storage: ImageStorage
) -> GreenovationDocument:
    """Uploads both images and stores the transformation.

    Raises:
        InvalidRequestError: If either image is missing or invalid
        StorageError: If the upload fails
    """
    if not data.original_image or not data.generated_image:
        raise InvalidRequestError("Both original and generated images are required")

    original, generated = await storage.save_pair(data.original_image, data.generated_image)

    greenovation = GreenovationDocument(
        user_id=user_id,
        name=data.name or f"Room Transformation {datetime.utcnow():%Y-%m-%d}",
        description=data.description or DEFAULT_DESCRIPTION,
        notes=data.notes or "",
        original_image=original.url,
        original_image_key=original.key,
        original_image_expires_at=original.expires_at,
        generated_image=generated.url,
        generated_image_key=generated.key,
        generated_image_expires_at=generated.expires_at,
    )
    try:
        await greenovation.insert()
    except Exception:
        logger.error(f"Failed to save greenovation for user {user_id}; removing uploaded images", exc_info=True)
        await storage.delete_image(original.key)
        await storage.delete_image(generated.key)
        raise

    logger.info(f"Created greenovation {greenovation.id} for user {user_id}")
    return greenovation


async def update_greenovation(
    greenovation_id: PydanticObjectId, user_id: PydanticObjectId, data: GreenovationUpdate
) -> Optional[GreenovationDocument]:
    """Updates a greenovation's name, description or notes."""
    greenovation = await get_greenovation(greenovation_id, user_id)
    if not greenovation:
        return None

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        return greenovation  # No changes requested

    update_data["updated_at"] = datetime.utcnow()
    await greenovation.update({"$set": update_data})
    await greenovation.reload()
    logger.info(f"Updated greenovation {greenovation_id} for user {user_id}")
    return greenovation


async def delete_greenovation(
    greenovation_id: PydanticObjectId, user_id: PydanticObjectId, storage: ImageStorage
) -> bool:
    """Deletes a greenovation and both of its stored images."""
    greenovation = await get_greenovation(greenovation_id, user_id)
    if not greenovation:
        return False

    for key in (greenovation.original_image_key, greenovation.generated_image_key):
        if key and not await storage.delete_image(key):
            logger.warning(f"Image {key} of greenovation {greenovation_id} was not removed")

    await greenovation.delete()
    logger.info(f"Deleted greenovation {greenovation_id} for user {user_id}")
    return True
