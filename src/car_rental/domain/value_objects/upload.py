"""Upload policy value objects for user documents and car images."""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..exceptions import InvalidOperationError

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "application/pdf": "pdf",
}


@dataclass(frozen=True)
class UploadPolicy:
    """Allowed MIME types and size ceiling for one kind of upload."""

    allowed_mime_types: FrozenSet[str]
    label: str
    max_size: int = MAX_FILE_SIZE

    def validate(self, content_type: Optional[str], size: int) -> None:
        """Reject files with a disallowed type or above the size ceiling."""
        if content_type not in self.allowed_mime_types:
            raise InvalidOperationError(f"Invalid file type. Allowed: {self.label}")
        if size > self.max_size:
            raise InvalidOperationError(
                f"File size must not exceed {self.max_size // (1024 * 1024)}MB"
            )

    @staticmethod
    def extension_for(content_type: str) -> str:
        """File extension used when storing a file of the given type."""
        return EXTENSIONS.get(content_type, "bin")


LICENSE_UPLOAD_POLICY = UploadPolicy(
    allowed_mime_types=frozenset({"image/png", "image/jpeg", "image/jpg", "application/pdf"}),
    label="png, jpg, jpeg, pdf",
)

CAR_IMAGE_UPLOAD_POLICY = UploadPolicy(
    allowed_mime_types=frozenset({"image/png", "image/jpeg", "image/jpg"}),
    label="png, jpg, jpeg",
)
