# menuboard/utils/tenant.py
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from menuboard.core.errors import ApiError
from menuboard.db import get_db
from menuboard.models.user import User


def get_tenant_subdomain(request: Request) -> str:
    subdomain = getattr(request.state, "tenant_subdomain", None)
    if not subdomain:
        raise ApiError("Tenant not specified. Use x-tenant-subdomain header or ?tenant= param", 400)
    return subdomain


async def get_public_tenant(
    subdomain: str = Depends(get_tenant_subdomain),
    db: AsyncSession = Depends(get_db),
) -> User:
    result = await db.execute(
        select(User).where(User.subdomain == subdomain, User.active == True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise ApiError("User not found or inactive", 404, {"subdomain": subdomain})
    return user
