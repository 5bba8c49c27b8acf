from typing import Optional

from fastapi_users import schemas


class UserRead(schemas.BaseUser[int]):
    name: Optional[str] = None
    subdomain: Optional[str] = None


class UserCreate(schemas.BaseUserCreate):
    name: Optional[str] = None
    subdomain: Optional[str] = None


class UserUpdate(schemas.BaseUserUpdate):
    name: Optional[str] = None
    subdomain: Optional[str] = None
