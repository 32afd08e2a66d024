from pydantic import BaseModel, Field


class LimitsUpdate(BaseModel):
    """New upload limits for a user or a group (space in MB)."""

    max_item_count: int = Field(ge=0)
    max_item_space: float = Field(gt=0)


class LimitsResponse(BaseModel):
    id: int
    name: str
    max_item_count: int
    max_item_space: float


class ItemTypeLimits(BaseModel):
    """Single-file size ceilings per item type, in MB."""

    max_size_picture: float = Field(gt=0)
    max_size_video: float = Field(gt=0)
