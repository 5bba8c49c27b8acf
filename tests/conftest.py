import os

# menuboard.db refuses to import without a database URL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from menuboard.models import Base, Category, Item, Menu, User


@pytest.fixture()
async def engine():
    """
    Isolated in-memory SQLite engine; StaticPool keeps every session on the
    same connection so they all see the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _make_user(db: AsyncSession, email: str, subdomain: str) -> User:
    user = User(
        email=email,
        hashed_password="not-a-real-hash",
        is_active=True,
        is_verified=True,
        is_superuser=False,
        name=subdomain.title(),
        subdomain=subdomain,
        active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture()
async def tenant(db):
    return await _make_user(db, "owner@labodega.test", "labodega")


@pytest.fixture()
async def other_tenant(db):
    return await _make_user(db, "owner@elfaro.test", "elfaro")


async def make_menu(db: AsyncSession, user: User, title: str = "Carta", active: bool = True) -> Menu:
    menu = Menu(user_id=user.id, title=title, active=active)
    db.add(menu)
    await db.commit()
    await db.refresh(menu)
    return menu


async def make_category(db: AsyncSession, menu: Menu, title: str, position: int) -> Category:
    category = Category(menu_id=menu.id, title=title, position=position, active=True)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def make_item(db: AsyncSession, category: Category, title: str, position: int) -> Item:
    item = Item(category_id=category.id, title=title, position=position, active=True)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@pytest.fixture()
def as_user(session_factory):
    """
    Returns a factory of AsyncClients authenticated as the given user: the
    session and current-user dependencies are overridden.
    """
    from menuboard.auth.routes import get_current_user
    from menuboard.db import get_db
    from menuboard.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    def _client(user=None) -> AsyncClient:
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        else:
            app.dependency_overrides.pop(get_current_user, None)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _client
    app.dependency_overrides.clear()
