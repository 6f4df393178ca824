"""Anonymous participant identity provisioning."""

from fastapi import APIRouter, status

from wordcloud_stage.schemas.entry import IdentityResponse
from wordcloud_stage.services.identity import generate_user_hash

router = APIRouter(prefix="/identity", tags=["identity"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=IdentityResponse)
async def issue_identity() -> IdentityResponse:
    """Issue an opaque participant token; the client is expected to keep it."""
    return IdentityResponse(user_hash=generate_user_hash())
