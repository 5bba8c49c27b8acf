from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from menuboard.auth.routes import get_current_user
from menuboard.crud import menu as crud
from menuboard.db import get_db
from menuboard.models.user import User
from menuboard.schemas.menu import MenuCreate, MenuImportSummary, MenuRead, MenuTreeRead, MenuUpdate
from menuboard.services.menu_import import import_menu_from_csv

router = APIRouter(prefix="/menus", tags=["menus"])


@router.get("", response_model=List[MenuRead])
async def list_menus(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.get_menus(db, user.id)


@router.get("/{menu_id}", response_model=MenuTreeRead)
async def get_menu(
    menu_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.get_menu_tree(db, user.id, menu_id)


@router.post("", response_model=MenuRead, status_code=201)
async def create_menu(
    payload: MenuCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.create_menu(db, user.id, payload)


@router.put("/{menu_id}", response_model=MenuRead)
async def update_menu(
    menu_id: int,
    payload: MenuUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await crud.update_menu(db, user.id, menu_id, payload)


@router.delete("/{menu_id}", status_code=204)
async def delete_menu(
    menu_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await crud.delete_menu(db, user.id, menu_id)


# ----- Bulk import (CSV)
@router.post("/{menu_id}/import-csv", response_model=MenuImportSummary)
async def import_menu_csv(
    menu_id: int,
    file: UploadFile = File(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await import_menu_from_csv(db, user.id, menu_id, file)
