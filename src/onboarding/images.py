"""
Profile Image Staging.

Validates a candidate profile picture and keeps it in memory until the
profile is submitted. No network call happens here; the upload is the
submission's first step.

Checks, in order:
1. declared MIME type starts with "image/"
2. size is at most MAX_IMAGE_BYTES (5 MiB)

A failed check leaves any previously staged image in place.
"""

import base64
import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024


class ImageError(str, Enum):
    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"


IMAGE_ERROR_MESSAGES = {
    ImageError.INVALID_TYPE: "Please select a valid image file",
    ImageError.TOO_LARGE: "Image file size must not exceed 5MB",
}


@dataclass(frozen=True)
class ImageFile:
    """A file picked by the user, before validation."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageFile":
        """Read a local file, guessing its MIME type from the extension."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content_type=content_type or "application/octet-stream",
            data=path.read_bytes(),
        )


@dataclass(frozen=True)
class StagedImage:
    """A validated image held for upload, with a data-URL preview."""
    source: ImageFile
    preview: str
    size: int
    content_type: str


@dataclass
class StageResult:
    ok: bool
    image: StagedImage | None = None
    error: ImageError | None = None
    message: str = ""


def check_image(file: ImageFile, max_bytes: int = MAX_IMAGE_BYTES) -> ImageError | None:
    if not file.content_type.startswith("image/"):
        return ImageError.INVALID_TYPE
    if file.size > max_bytes:
        return ImageError.TOO_LARGE
    return None


def to_data_url(file: ImageFile) -> str:
    encoded = base64.b64encode(file.data).decode("ascii")
    return f"data:{file.content_type};base64,{encoded}"


class ImageStager:
    """Holds at most one staged image."""

    def __init__(self, max_bytes: int = MAX_IMAGE_BYTES):
        self.max_bytes = max_bytes
        self._staged: StagedImage | None = None

    @property
    def staged(self) -> StagedImage | None:
        return self._staged

    def stage(self, file: ImageFile) -> StageResult:
        error = check_image(file, self.max_bytes)
        if error:
            message = IMAGE_ERROR_MESSAGES[error]
            if error == ImageError.TOO_LARGE and self.max_bytes != MAX_IMAGE_BYTES:
                message = f"Image file size must not exceed {self.max_bytes} bytes"
            logger.warning(f"Rejected image {file.filename!r}: {error.value}")
            return StageResult(ok=False, error=error, message=message)

        staged = StagedImage(
            source=file,
            preview=to_data_url(file),
            size=file.size,
            content_type=file.content_type,
        )
        self._staged = staged
        logger.info(f"Staged profile image {file.filename!r} ({file.size} bytes)")
        return StageResult(ok=True, image=staged)

    def clear(self) -> None:
        self._staged = None
