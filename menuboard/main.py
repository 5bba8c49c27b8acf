import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from dotenv import load_dotenv

from menuboard.core.config import settings
from menuboard.core.errors import register_error_handlers
from menuboard.core.logging import configure_logging
from menuboard.middleware.tenant_middleware import TenantMiddleware
from menuboard.auth.routes import auth_backend, fastapi_users, get_current_user
from menuboard.schemas.user import UserRead, UserCreate, UserUpdate
from menuboard.api import menu_routes, category_routes, item_routes, image_routes, public_routes
import menuboard.models  # registers all models via models/__init__.py
from sqlalchemy.orm import configure_mappers
configure_mappers()

load_dotenv()
configure_logging(settings.log_level, settings.sql_echo)

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema is owned by Alembic; nothing to create here
    log.info("🔧 Menuboard API starting")
    yield
    log.info("Menuboard API stopped")


# Create the FastAPI app
app = FastAPI(lifespan=lifespan)

register_error_handlers(app)

# ✅ Tenant middleware (injects request.state.tenant_subdomain)
app.add_middleware(TenantMiddleware)

# ✅ Allow frontend (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ✅ Swagger Bearer token support for "Authorize" button
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Menuboard API",
        version="1.0.0",
        description="API for managing restaurant menus, categories, items and images.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    for path, operations in openapi_schema["paths"].items():
        if path.startswith("/public") or path.startswith("/auth"):
            continue
        for operation in operations.values():
            operation["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# ✅ Auth routes
app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["auth"]
)
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["auth"]
)
app.include_router(
    fastapi_users.get_reset_password_router(),
    prefix="/auth",
    tags=["auth"]
)
app.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"]
)


@app.get("/whoami", response_model=UserRead)
async def whoami(user=Depends(get_current_user)):
    return user


# ✅ Core app routers
app.include_router(menu_routes.router)
app.include_router(category_routes.router)
app.include_router(item_routes.router)
app.include_router(image_routes.router)
app.include_router(public_routes.router)
