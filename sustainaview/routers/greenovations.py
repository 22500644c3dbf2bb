"""API endpoints for saved room transformations."""

import logging
from typing import List

from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, HTTPException, status

from sustainaview.auth import current_active_user
from sustainaview.schemas.greenovations import (
    GreenovationCreate,
    GreenovationRead,
    GreenovationUpdate,
)
from sustainaview.schemas.users import User
from sustainaview.services import greenovations as greenovation_service
from sustainaview.services.container import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/greenovations",
    tags=["greenovations"],
    dependencies=[Depends(current_active_user)],  # Protect all routes in this router
)


def _user_id(user: User) -> PydanticObjectId:
    if user.id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User ID is missing for authenticated user",
        )
    return user.id


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Greenovation not found")


@router.get("", response_model=List[GreenovationRead])
async def list_greenovations(
    user: User = Depends(current_active_user),
    services: ServiceContainer = Depends(get_services),
) -> List[GreenovationRead]:
    """List the user's greenovations, newest first."""
    greenovations = await greenovation_service.list_greenovations(_user_id(user), services.storage)
    return [GreenovationRead.model_validate(g.model_dump()) for g in greenovations]


@router.post("", response_model=GreenovationRead, status_code=status.HTTP_201_CREATED)
async def create_greenovation(
    data: GreenovationCreate,
    user: User = Depends(current_active_user),
    services: ServiceContainer = Depends(get_services),
) -> GreenovationRead:
    """Save a before/after pair. Both images are required."""
    greenovation = await greenovation_service.create_greenovation(_user_id(user), data, services.storage)
    return GreenovationRead.model_validate(greenovation.model_dump())


@router.get("/{greenovation_id}", response_model=GreenovationRead)
async def get_greenovation(
    greenovation_id: PydanticObjectId,
    user: User = Depends(current_active_user),
    services: ServiceContainer = Depends(get_services),
) -> GreenovationRead:
    greenovation = await greenovation_service.get_fresh_greenovation(
        greenovation_id, _user_id(user), services.storage
    )
    if not greenovation:
        raise _not_found()
    return GreenovationRead.model_validate(greenovation.model_dump())


@router.patch("/{greenovation_id}", response_model=GreenovationRead)
async def update_greenovation(
    greenovation_id: PydanticObjectId,
    update_data: GreenovationUpdate,
    user: User = Depends(current_active_user),
) -> GreenovationRead:
    """Rename or annotate a greenovation."""
    greenovation = await greenovation_service.update_greenovation(greenovation_id, _user_id(user), update_data)
    if not greenovation:
        raise _not_found()
    return GreenovationRead.model_validate(greenovation.model_dump())


@router.post("/{greenovation_id}/refresh", response_model=GreenovationRead)
async def refresh_greenovation_images(
    greenovation_id: PydanticObjectId,
    user: User = Depends(current_active_user),
    services: ServiceContainer = Depends(get_services),
) -> GreenovationRead:
    """Re-sign both image URLs regardless of their expiry."""
    greenovation = await greenovation_service.get_fresh_greenovation(
        greenovation_id, _user_id(user), services.storage, force=True
    )
    if not greenovation:
        raise _not_found()
    return GreenovationRead.model_validate(greenovation.model_dump())


@router.delete("/{greenovation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_greenovation(
    greenovation_id: PydanticObjectId,
    user: User = Depends(current_active_user),
    services: ServiceContainer = Depends(get_services),
) -> None:
    """Delete a greenovation and its stored images."""
    deleted = await greenovation_service.delete_greenovation(greenovation_id, _user_id(user), services.storage)
    if not deleted:
        raise _not_found()
    return None  # Return No Content on successful deletion
