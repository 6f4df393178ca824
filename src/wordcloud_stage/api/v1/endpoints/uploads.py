"""Background image upload."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile, status

from wordcloud_stage.schemas.common import ErrorResponse
from wordcloud_stage.schemas.summary import ImageUploadResponse
from wordcloud_stage.services.upload import encode_upload

router = APIRouter(prefix="/upload", tags=["uploads"])


@router.post(
    "/image",
    response_model=ImageUploadResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def upload_image(image: Annotated[UploadFile | None, File()] = None) -> ImageUploadResponse:
    """Accept a JPEG, PNG, GIF or WebP image and return it as a data URI."""
    encoded = await encode_upload(image)
    return ImageUploadResponse(
        url=encoded.url,
        filename=encoded.filename,
        size=encoded.size,
        type=encoded.content_type,
    )
