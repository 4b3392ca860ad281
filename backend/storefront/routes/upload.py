"""
Storefront Backend — Upload Route Handlers
============================================

What:  POST /upload/file stores one multipart file; GET
       /upload/uploads/{filename} sends it back.
How:   The multipart "file" field is read into memory (bounded by
       MAX_FILE_SIZE) and handed to UploadService.

Request Flow (upload):
    1. Client sends multipart/form-data with a 'file' field
    2. Missing field → 400 "No file uploaded"
    3. UploadService validates size and writes <timestamp>-<name>
    4. 200 {"message": ..., "filePath": "/uploads/<stored name>"}

The returned filePath is relative to the /upload prefix.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from storefront.dependencies import get_upload_service
from storefront.exceptions import ValidationError
from storefront.schemas.common import ErrorResponse, UploadResponse
from storefront.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post(
    "/file",
    response_model=UploadResponse,
    responses={400: {"description": "No file uploaded or file too large", "model": ErrorResponse}},
    summary="Upload a file",
)
async def upload_file(
    file: Optional[UploadFile] = File(default=None, description="File to upload"),
    service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    if file is None:
        raise ValidationError(message="No file uploaded", field="file")

    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes",
            file.filename or "unknown",
            len(content),
        )
        stored_name = await service.store_upload(
            original_filename=file.filename,
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()

    return UploadResponse(file_path=f"/uploads/{stored_name}")


@router.get(
    "/uploads/{filename}",
    response_class=FileResponse,
    responses={
        200: {"description": "File retrieved successfully"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Get an uploaded file",
)
async def get_uploaded_file(
    filename: str,
    service: UploadService = Depends(get_upload_service),
) -> FileResponse:
    path = service.resolve(filename)
    # media type is guessed from the stored name
    return FileResponse(path=str(path))
