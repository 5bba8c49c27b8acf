# menuboard/utils/security.py

import os

from fastapi import UploadFile

from menuboard.core.errors import ApiError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
ALLOWED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp"}

CSV_ALLOWED_TYPES = {"text/csv", "application/csv", "text/plain", "application/vnd.ms-excel"}
MAX_CSV_SIZE = 2 * 1024 * 1024  # 2MB


async def validate_and_read_image(file: UploadFile) -> bytes:
    if (file.content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise ApiError("Invalid file type.", 400, {"content_type": file.content_type})

    contents = await file.read()

    if len(contents) > MAX_FILE_SIZE:
        raise ApiError("File too large (10MB max).", 400)

    return contents


def image_extension(file: UploadFile) -> str:
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext in ALLOWED_IMAGE_EXTS:
        return ext
    return {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/webp": ".webp",
    }.get((file.content_type or "").lower(), "")


async def validate_and_read_csv(file: UploadFile) -> bytes:
    if file is None:
        raise ApiError("Upload a CSV file in the 'file' field.", 400)

    content_type = (file.content_type or "").lower()
    if content_type not in CSV_ALLOWED_TYPES:
        raise ApiError("Invalid format. Only CSV files are accepted.", 400, {"content_type": content_type})

    contents = await file.read()
    if len(contents) > MAX_CSV_SIZE:
        raise ApiError("File too large (2MB max).", 400)
    return contents
