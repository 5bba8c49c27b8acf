from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from menuboard.schemas.item import ItemTreeRead


class CategoryBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class CategoryCreate(CategoryBase):
    menu_id: int = Field(..., gt=0)
    active: bool = True


class CategoryUpdate(BaseModel):
    """
    Only the fields present in the request body are applied; a body with
    none of them changes nothing.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    active: Optional[bool] = None
    # any number is accepted, it is clamped to a valid position
    new_position: Optional[float] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class CategoryRead(CategoryBase):
    id: int
    menu_id: int
    active: bool
    position: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryTreeRead(CategoryRead):
    items: List[ItemTreeRead] = []
