"""
Employee photo uploads.

The stored file's URL is returned to the client, which then saves it on a
position through the job edit endpoint (``employee_photo_url``).
"""

import io
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from app.core.config import settings
from app.core.deps import CurrentUser, require_ability
from app.core.permissions import Ability
from app.core.storage import CONTENT_TYPES, StorageBackend, StorageError, file_extension, get_storage

router = APIRouter(prefix="/uploads", tags=["Uploads"])
logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = set(CONTENT_TYPES.values())
CHUNK_SIZE = 64 * 1024


@router.post("/photo")
async def upload_photo(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(require_ability(Ability.PHOTO_UPLOAD)),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Store an image and return its URL.

    Accepts JPEG, PNG, GIF and WebP up to MAX_UPLOAD_BYTES.
    """
    extension = file_extension(file.filename)
    if file.content_type not in ALLOWED_CONTENT_TYPES or extension not in CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_file_type", "message": "Only JPEG, PNG, GIF and WebP images are allowed"},
        )

    # Stop reading as soon as the limit is passed
    content = io.BytesIO()
    size = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail={"code": "file_too_large", "message": f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes"},
            )
        content.write(chunk)

    if not size:
        raise HTTPException(status_code=400, detail={"code": "empty_file", "message": "File is empty"})

    content.seek(0)
    try:
        url = storage.upload_file(content, file.filename)
    except StorageError as e:
        logger.error(f"Photo upload failed for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail={"code": "storage_error", "message": "Could not store file"})

    logger.info(f"User {user.id} uploaded photo {url} ({size} bytes)")
    return {"url": url}
