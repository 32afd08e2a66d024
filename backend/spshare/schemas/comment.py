from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    text: str = Field(min_length=1, max_length=400)


class CommentResponse(BaseModel):
    """Comment with the author's display name."""

    id: int
    item_id: int
    author_id: int
    author_name: str
    text: str
    created_at: datetime

    @classmethod
    def from_models(cls, comment, author) -> "CommentResponse":
        return cls(
            id=comment.id,
            item_id=comment.item_id,
            author_id=comment.author_id,
            author_name=author.full_name if author else "",
            text=comment.text,
            created_at=comment.created_at,
        )
