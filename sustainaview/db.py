"""Database connection and initialization."""

import logging

from beanie import init_beanie
from fastapi_users.db import BeanieUserDatabase
from motor.motor_asyncio import AsyncIOMotorClient

from sustainaview.config import settings
from sustainaview.schemas.greenovations import GreenovationDocument
from sustainaview.schemas.users import User
from sustainaview.schemas.wishlist import WishlistDocument

logger = logging.getLogger(__name__)


async def get_user_db():
    yield BeanieUserDatabase(User)  # type: ignore


async def init_db() -> AsyncIOMotorClient:
    """Initialize the database connection and document models."""
    logger.info(f"Connecting to MongoDB database: {settings.database.database_name}")

    client = AsyncIOMotorClient(settings.database.uri)

    document_models = [
        User,
        WishlistDocument,
        GreenovationDocument,
    ]

    try:
        await init_beanie(
            database=client[settings.database.database_name],
            document_models=document_models,
        )
        logger.info("Database initialization successful")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
    return client


async def check_connection() -> bool:
    """Check if the database connection is healthy.

    Returns:
        bool: True if connection is healthy, False otherwise
    """
    try:
        client = AsyncIOMotorClient(
            settings.database.uri,
            serverSelectionTimeoutMS=5000,
        )
        await client.admin.command("ping")
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
