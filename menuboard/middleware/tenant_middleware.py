from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

TENANT_HEADER = "x-tenant-subdomain"


class TenantMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        subdomain = request.headers.get(TENANT_HEADER) or request.query_params.get("tenant")
        request.state.tenant_subdomain = subdomain.strip().lower() if subdomain else None
        return await call_next(request)
