import logging
import uuid
from typing import Optional
from urllib.parse import urlparse

import aioboto3

from menuboard.core.config import settings
from menuboard.core.errors import ApiError

log = logging.getLogger(__name__)

_session = aioboto3.Session()


def _ensure_configured() -> None:
    if not all([
        settings.spaces_key,
        settings.spaces_secret,
        settings.spaces_bucket,
        settings.spaces_endpoint,
        settings.spaces_cdn_base,
    ]):
        raise RuntimeError("Spaces env vars not fully configured")


def _client():
    return _session.client(
        "s3",
        region_name=settings.spaces_region,
        endpoint_url=settings.spaces_endpoint,
        aws_access_key_id=settings.spaces_key,
        aws_secret_access_key=settings.spaces_secret,
    )


def public_url(key: str) -> str:
    key = key.lstrip("/")
    return f"{settings.spaces_cdn_base}/{key}"


def key_from_url(url: Optional[str]) -> Optional[str]:
    """Object key of a public URL we handed out, None for anything else."""
    if not url or not settings.spaces_cdn_base:
        return None
    base = settings.spaces_cdn_base.rstrip("/") + "/"
    if not url.startswith(base):
        return None
    key = urlparse(url).path.lstrip("/")
    # CDN bases may carry a path prefix of their own
    base_path = urlparse(base).path.strip("/")
    if base_path and key.startswith(base_path + "/"):
        key = key[len(base_path) + 1:]
    return key or None


def build_key(tenant_id: int, folder: str, ext: str) -> str:
    prefix = settings.spaces_prefix.strip("/")
    return f"{prefix}/tenants/{tenant_id}/{folder.strip('/')}/{uuid.uuid4().hex}{ext}"


async def put_public_object(*, key: str, body: bytes, content_type: str) -> str:
    """
    Uploads a public-read object to Spaces and returns the object key.
    """
    _ensure_configured()

    key = key.lstrip("/")
    async with _client() as s3:
        await s3.put_object(
            Bucket=settings.spaces_bucket,
            Key=key,
            Body=body,
            ContentType=content_type or "application/octet-stream",
            ACL="public-read",
        )
    log.info("Uploaded object %s (%d bytes)", key, len(body))
    return key


async def delete_object(key: str) -> None:
    _ensure_configured()

    key = key.lstrip("/")
    try:
        async with _client() as s3:
            await s3.delete_object(Bucket=settings.spaces_bucket, Key=key)
    except Exception as e:
        raise ApiError("Could not delete image from storage", 500, {"key": key}, e)
    log.info("Deleted object %s", key)


async def delete_by_url(url: Optional[str]) -> None:
    key = key_from_url(url)
    if not key:
        return
    await delete_object(key)
