"""Local disk storage for product images, served under ``/uploads``."""

import asyncio
import logging
import os
import secrets
import string
import time
from pathlib import Path
from typing import List, Optional, Sequence

from fastapi import UploadFile

from ideaboard.errors import ValidationError

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"
_NAME_ALPHABET = string.digits + string.ascii_lowercase


def upload_url(filename: str) -> str:
    return f"{UPLOADS_URL_PREFIX}/{filename}"


def _stored_name(original: Optional[str]) -> str:
    suffix = Path(original or "").suffix
    token = "".join(secrets.choice(_NAME_ALPHABET) for _ in range(7))
    return f"{int(time.time() * 1000)}-{token}{suffix}"


class UploadStorage:
    def __init__(self, directory: str, max_bytes: int, max_files: int):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.max_files = max_files

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: UploadFile) -> str:
        """Write one file and return its stored filename."""
        data = await upload.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise ValidationError(f"File '{upload.filename}' exceeds {self.max_bytes} bytes")

        filename = _stored_name(upload.filename)
        # Run blocking disk I/O in a threadpool to keep the event loop free
        await asyncio.to_thread((self.directory / filename).write_bytes, data)
        return filename

    async def save_all(self, uploads: Sequence[UploadFile]) -> List[str]:
        uploads = [u for u in uploads if u.filename]
        if len(uploads) > self.max_files:
            raise ValidationError(f"At most {self.max_files} images per request")

        saved: List[str] = []
        try:
            for upload in uploads:
                saved.append(await self.save(upload))
        except ValidationError:
            self.remove(saved)
            raise
        return saved

    def remove(self, filenames: Sequence[str]) -> None:
        for filename in filenames:
            try:
                os.remove(self.directory / filename)
            except FileNotFoundError:
                logger.warning(f"Upload {filename} already removed")
