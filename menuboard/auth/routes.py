from fastapi import Depends
from fastapi_users import FastAPIUsers
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from menuboard.auth.manager import UserManager
from menuboard.core.config import settings
from menuboard.db import get_db
from menuboard.models.user import User

bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    # Tokens issued before a change of JWT_AUDIENCE stop validating
    return JWTStrategy(
        secret=settings.auth_secret,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        token_audience=[settings.jwt_audience],
    )


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)


async def get_user_db(session: AsyncSession = Depends(get_db)):
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


fastapi_users = FastAPIUsers[User, int](get_user_manager, [auth_backend])

# Every tenant-scoped route resolves the tenant from the bearer token
get_current_user = fastapi_users.current_user(active=True)
