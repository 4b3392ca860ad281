"""
Storefront Backend — Upload Service
=====================================

What:  Stores uploaded files in the upload directory and resolves them back
       for download.
How:   Files are written with aiofiles under a timestamp-prefixed name:
       <milliseconds since epoch>-<original filename>.
Who:   Called by the /upload routes.

Directory Structure:
    data/uploads/
    ├── 1714564800123-invoice.pdf
    └── 1714564801456-a.png

Naming caveat:
    Two uploads with the same original name in the same millisecond map to
    the same stored name; the later write replaces the earlier one.

Path handling:
    Directory components of the client-supplied name are dropped, and
    lookups must resolve to a file directly inside the upload directory.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import aiofiles

from storefront.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10_485_760
FALLBACK_FILENAME = "upload"


class UploadService:
    """
    Manages the upload directory.

    Lifecycle of an uploaded file:
        1. Route reads the multipart "file" field → UploadService.store_upload()
        2. Size check against max_file_size
        3. Stored name generated from the current time and original name
        4. Bytes written to disk; the stored name is returned
        5. GET /upload/uploads/{name} → UploadService.resolve() → FileResponse
    """

    def __init__(self, upload_dir: str, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        """
        Args:
            upload_dir: Directory receiving the files; created on first write
                        if it does not exist yet.
            max_file_size: Largest accepted upload in bytes.
        """
        self.upload_dir = Path(upload_dir).resolve()
        self.max_file_size = max_file_size

    def ensure_directory(self) -> None:
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create upload directory %s: %s", self.upload_dir, str(e))
            raise FileStorageError(
                message="Upload storage is not available. Please try again later.",
                context={"path": str(self.upload_dir), "os_error": str(e)},
            )

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject uploads above max_file_size.

        The Content-Length of the part is checked first, then the number of
        bytes actually received.
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def generate_filename(self, original_filename: Optional[str]) -> str:
        """<millisecond timestamp>-<basename of the original filename>"""
        base = Path(original_filename or "").name or FALLBACK_FILENAME
        return f"{int(time.time() * 1000)}-{base}"

    async def store_upload(
        self,
        original_filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Validate and write an uploaded file.

        Returns:
            The stored filename (relative to the upload directory).

        Raises:
            ValidationError: file too large.
            FileStorageError: directory creation or write failed.
        """
        self.validate_size(content_length, len(content))
        self.ensure_directory()

        stored_name = self.generate_filename(original_filename)
        path = self.upload_dir / stored_name
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", stored_name, len(content))
        return stored_name

    def resolve(self, filename: str) -> Path:
        """
        Absolute path of a stored upload.

        Raises:
            ValidationError: the name points outside the upload directory.
            NotFoundError: no such file.
        """
        path = (self.upload_dir / filename).resolve()
        if path.parent != self.upload_dir:
            raise ValidationError(message="Invalid file path", field="filename")
        if not path.is_file():
            raise NotFoundError(resource="file", resource_id=filename)
        return path
