"""Platform-wide statistics schema."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PlatformStats(BaseModel):
    """Global counters: posts created and users registered."""

    total_posts: int = Field(..., ge=0)
    total_users: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)
