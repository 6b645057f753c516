"""Port interface for uploaded file storage."""

from abc import ABC, abstractmethod


class FileStorage(ABC):
    """Stores uploaded files and returns a URL under which they are served."""

    @abstractmethod
    async def save(self, content: bytes, folder: str, extension: str) -> str:
        """Persist content under folder and return its public URL."""
        raise NotImplementedError
