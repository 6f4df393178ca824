"""Background image upload validation and data-URI encoding."""

from __future__ import annotations

import base64
from dataclasses import dataclass

from fastapi import UploadFile

from wordcloud_stage.core.errors import InvalidInputError
from wordcloud_stage.core.settings import settings

ALLOWED_IMAGE_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)


@dataclass(frozen=True)
class EncodedImage:
    """An uploaded image re-encoded for inline storage."""

    url: str
    filename: str | None
    size: int
    content_type: str


def detect_image_type(content: bytes) -> str | None:
    """Detect an image MIME type from its magic bytes."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def encode_image(content: bytes, declared_type: str | None, filename: str | None = None) -> EncodedImage:
    """Validate image bytes and return them as a ``data:`` URI.

    Raises:
        InvalidInputError: If the type is not allowed, the content does not
            look like an image, or the file exceeds the size limit.
    """
    if declared_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidInputError(
            "Invalid file type. Please upload a JPEG, PNG, GIF, or WebP image."
        )
    if not content:
        raise InvalidInputError("File is empty")
    if len(content) > settings.upload_max_bytes:
        max_mb = settings.upload_max_bytes / (1024 * 1024)
        raise InvalidInputError(
            f"File too large. Please upload an image smaller than {max_mb:g}MB."
        )

    detected = detect_image_type(content)
    if detected is None:
        raise InvalidInputError("File content is not a recognised image")

    encoded = base64.b64encode(content).decode("ascii")
    return EncodedImage(
        url=f"data:{detected};base64,{encoded}",
        filename=filename,
        size=len(content),
        content_type=detected,
    )


async def encode_upload(file: UploadFile | None) -> EncodedImage:
    """Read an uploaded file and encode it."""
    if file is None:
        raise InvalidInputError("No image file provided")
    content = await file.read(settings.upload_max_bytes + 1)
    return encode_image(content, file.content_type, file.filename)
