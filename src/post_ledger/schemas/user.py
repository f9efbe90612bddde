"""User profile schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserProfileView(BaseModel):
    """Public view of a registered profile."""

    identity: str
    username: str
    bio: str
    profile_image_ref: str
    post_count: int = Field(..., ge=0)
    total_likes: int = Field(..., ge=0)
    registered: bool

    model_config = ConfigDict(from_attributes=True, frozen=True)
