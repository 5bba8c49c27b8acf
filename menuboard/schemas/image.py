from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class ItemImageRead(BaseModel):
    id: int
    item_id: int
    url: str
    alt: Optional[str] = None
    sort_order: int
    active: bool

    class Config:
        from_attributes = True


class ItemImageUpsert(BaseModel):
    """
    One entry of an image set upsert. New images need either `url` or
    `file_field` (the multipart field holding the upload); existing ones
    are addressed by `id` and can be dropped with `delete`.
    """
    id: Optional[int] = Field(None, gt=0)
    url: Optional[str] = Field(None, max_length=1024)
    file_field: Optional[str] = Field(None, min_length=1)
    alt: Optional[str] = Field(None, max_length=255)
    sort_order: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None
    delete: bool = False

    @model_validator(mode="after")
    def check_source(self):
        if self.id is None and not (self.url or self.file_field):
            raise ValueError("New images need url or file_field")
        if self.id is None and self.delete:
            raise ValueError("delete requires id")
        return self


class ItemImagesUpsert(BaseModel):
    images: List[ItemImageUpsert] = []
