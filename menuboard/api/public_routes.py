from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from menuboard.crud.menu import get_menu_tree
from menuboard.db import get_db
from menuboard.models.user import User
from menuboard.schemas.menu import MenuTreeRead
from menuboard.utils.tenant import get_public_tenant

router = APIRouter(prefix="/public", tags=["public"])


# ----- Public menu (no auth, tenant from x-tenant-subdomain / ?tenant=)
@router.get("/menus/{menu_id}", response_model=MenuTreeRead)
async def get_public_menu(
    menu_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: User = Depends(get_public_tenant),
):
    return await get_menu_tree(db, tenant.id, menu_id, active_only=True)
