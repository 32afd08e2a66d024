from datetime import datetime
from typing import Optional

from pydantic import BaseModel, computed_field

from ..models.enums import ItemType
from .comment import CommentResponse


class ItemResponse(BaseModel):
    """Item response model."""

    id: int
    name: str
    description: str
    item_type: ItemType
    size_bytes: int
    group_id: int
    created_by: int
    uploaded: bool
    created_at: datetime
    last_accessed: Optional[datetime] = None
    group_name: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def item_type_label(self) -> str:
        return self.item_type.label


class ItemDetails(ItemResponse):
    """Single item page with its comments."""

    created_by_name: str = ""
    comments: list[CommentResponse] = []


class HomeFeed(BaseModel):
    """Uploaded items visible to the caller, split by kind."""

    pictures: list[ItemResponse] = []
    videos: list[ItemResponse] = []
