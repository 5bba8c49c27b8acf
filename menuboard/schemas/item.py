from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from menuboard.schemas.image import ItemImageRead


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ItemBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=160)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v):
        return _blank_to_none(v)


class ItemCreate(ItemBase):
    category_id: int = Field(..., gt=0)
    active: bool = True


class ItemUpdate(BaseModel):
    """
    Only the fields present in the request body are applied. `description`
    and `price` may be sent as null to clear them.
    """
    category_id: Optional[int] = Field(None, gt=0)
    title: Optional[str] = Field(None, min_length=1, max_length=160)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    active: Optional[bool] = None
    new_position: Optional[float] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v):
        return _blank_to_none(v)


class ItemRead(ItemBase):
    id: int
    category_id: int
    active: bool
    position: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemTreeRead(ItemRead):
    images: List[ItemImageRead] = []
