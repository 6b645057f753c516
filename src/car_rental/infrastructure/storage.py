"""Local disk storage for uploaded files, served back through a static mount."""

import asyncio
import os
from uuid import uuid4

from src.car_rental.application.ports.storage import FileStorage
from src.car_rental.infrastructure.logging import get_logger


def _write_file(target_dir: str, filename: str, content: bytes) -> None:
    os.makedirs(target_dir, exist_ok=True)
    with open(os.path.join(target_dir, filename), "wb") as f:
        f.write(content)


class LocalFileStorage(FileStorage):
    """Writes uploads below upload_dir/<folder>/ under a random file name."""

    def __init__(self, upload_dir: str, url_prefix: str):
        self._upload_dir = upload_dir
        self._url_prefix = url_prefix.rstrip("/")
        self._logger = get_logger(__name__)
        os.makedirs(self._upload_dir, exist_ok=True)

    async def save(self, content: bytes, folder: str, extension: str) -> str:
        filename = f"{uuid4().hex}.{extension}"

        # Disk writes run off the event loop
        await asyncio.to_thread(_write_file, os.path.join(self._upload_dir, folder), filename, content)

        self._logger.debug(f"Stored {len(content)} bytes as {folder}/{filename}")
        return f"{self._url_prefix}/{folder}/{filename}"
