"""Post-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LikeState(str, Enum):
    """Outcome of a like toggle."""

    LIKED = "liked"
    UNLIKED = "unliked"


class PostView(BaseModel):
    """Snapshot of a post. The like set itself is never exposed."""

    id: int = Field(..., ge=1)
    author: str
    title: str
    content: str
    content_ref: str
    created_at: datetime
    like_count: int = Field(..., ge=0)
    active: bool

    model_config = ConfigDict(from_attributes=True, frozen=True)
