from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from menuboard.schemas.category import CategoryTreeRead

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class MenuColor(BaseModel):
    primary: str = Field(..., pattern=HEX_COLOR)
    secondary: str = Field(..., pattern=HEX_COLOR)


# ---------- Menu ----------
class MenuBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    active: bool = True
    logo: Optional[str] = Field(None, max_length=255)
    background_image: Optional[str] = Field(None, max_length=255)
    color: Optional[MenuColor] = None
    pos: Optional[str] = Field(None, max_length=255)


class MenuCreate(MenuBase):
    pass


class MenuUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    active: Optional[bool] = None
    logo: Optional[str] = Field(None, max_length=255)
    background_image: Optional[str] = Field(None, max_length=255)
    color: Optional[MenuColor] = None
    pos: Optional[str] = Field(None, max_length=255)


class MenuRead(MenuBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MenuTreeRead(MenuRead):
    categories: List[CategoryTreeRead] = []


class MenuImportError(BaseModel):
    row: int
    message: str


class MenuImportSummary(BaseModel):
    created_categories: int = 0
    reused_categories: int = 0
    created_items: int = 0
    errors: List[MenuImportError] = []
