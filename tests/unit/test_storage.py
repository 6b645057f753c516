"""Unit tests for local upload storage."""

import asyncio
import os
from unittest.mock import patch

import pytest

from src.car_rental.infrastructure.storage import LocalFileStorage

# Mark all async tests in this module
pytestmark = pytest.mark.asyncio


async def test_save_writes_file_below_folder(tmp_path):
    storage = LocalFileStorage(str(tmp_path), "/api/v1/uploads/")

    url = await storage.save(b"%PDF-1.4", folder="licenses", extension="pdf")

    assert url.startswith("/api/v1/uploads/licenses/")
    assert url.endswith(".pdf")
    stored = tmp_path / "licenses" / os.path.basename(url)
    assert stored.read_bytes() == b"%PDF-1.4"


async def test_disk_write_runs_in_worker_thread(tmp_path):
    storage = LocalFileStorage(str(tmp_path), "/uploads")

    with patch("asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
        await storage.save(b"png-bytes", folder="cars", extension="png")

    to_thread.assert_called_once()
    assert len(list((tmp_path / "cars").iterdir())) == 1
