from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from menuboard.auth.routes import get_current_user
from menuboard.crud import item as crud
from menuboard.db import get_db
from menuboard.models.user import User
from menuboard.schemas.item import ItemCreate, ItemRead, ItemTreeRead, ItemUpdate

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=List[ItemTreeRead])
async def list_items(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.get_items(db, user.id)


@router.get("/{item_id}", response_model=ItemTreeRead)
async def get_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.get_item(db, user.id, item_id, active_only=True)


@router.post("", response_model=ItemRead, status_code=201)
async def create_item(
    payload: ItemCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.create_item(db, user.id, payload)


# ----- Update / reorder (new_position)
@router.put("/{item_id}", response_model=ItemRead)
async def update_item(
    item_id: int,
    payload: ItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.update_item(db, user.id, item_id, payload)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await crud.delete_item(db, user.id, item_id)
