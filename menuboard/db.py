from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from dotenv import load_dotenv

from menuboard.core.config import settings
from menuboard.models.base import Base
import os

# Load environment
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL") or settings.database_url
if not DATABASE_URL:
    raise ValueError("❌ DATABASE_URL is not set!")

# Create engine
engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo)

# Async session maker
async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Dependency: one session (and one transaction) per request
async def get_db():
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_db_and_tables():
    import menuboard.models  # triggers __init__.py

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Reusable engine getter
def get_async_engine():
    return engine
