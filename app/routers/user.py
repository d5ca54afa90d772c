"""User routes: profile of the bearer token's owner."""
from fastapi import APIRouter

from app.deps import CurrentUser
from app.schemas.user import ProfileResponse, ProfileSchema

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: CurrentUser):
    return ProfileResponse(user=ProfileSchema.model_validate(user))
