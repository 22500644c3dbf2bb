from datetime import datetime

from beanie import Document, PydanticObjectId
from fastapi_users.db import BeanieBaseUser
from fastapi_users.schemas import BaseUser, BaseUserCreate, BaseUserUpdate
from pydantic import Field


class User(BeanieBaseUser, Document):
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings(BeanieBaseUser.Settings):
        name = "users"


class UserRead(BaseUser[PydanticObjectId]):
    pass


class UserCreate(BaseUserCreate):
    pass


class UserUpdate(BaseUserUpdate):
    pass
