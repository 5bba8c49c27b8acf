import json
from typing import List

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from menuboard.auth.routes import get_current_user
from menuboard.core.errors import ApiError
from menuboard.crud import item_image as crud
from menuboard.db import get_db
from menuboard.models.user import User
from menuboard.schemas.image import ItemImageRead, ItemImagesUpsert

router = APIRouter(prefix="/images", tags=["images"])


async def _parse_upsert_body(request: Request):
    """
    Accepts JSON bodies or multipart forms carrying a `payload` JSON field
    plus the files its entries point at through `file_field`.
    """
    content_type = request.headers.get("content-type", "")
    files = {}
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        raw = form.get("payload") or "{}"
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = value
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ApiError("payload must be valid JSON", 400, cause=e)
    else:
        try:
            data = await request.json()
        except ValueError as e:
            raise ApiError("Body must be valid JSON", 400, cause=e)

    if isinstance(data, list):
        data = {"images": data}
    try:
        return ItemImagesUpsert.model_validate(data), files
    except ValidationError as e:
        details = [
            {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ApiError("Invalid data", 400, details)


@router.get("/items/{item_id}", response_model=List[ItemImageRead])
async def list_item_images(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.get_item_images(db, user.id, item_id)


@router.put("/items/{item_id}", response_model=List[ItemImageRead])
async def upsert_item_images(
    item_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    body, files = await _parse_upsert_body(request)
    return await crud.upsert_item_images(db, user.id, item_id, body.images, files)


@router.delete("/{image_id}", status_code=204)
async def delete_item_image(
    image_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await crud.delete_item_image(db, user.id, image_id)
