from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text
from datetime import datetime
from typing import Optional


class Comment(SQLModel, table=True):
    """Comment left on an item. Comments are append-only."""

    id: Optional[int] = Field(default=None, primary_key=True)

    # Associations
    item_id: int = Field(foreign_key="item.id", index=True)
    author_id: int = Field(foreign_key="user.id", index=True)

    # Comment content (HTML-escaped on insert)
    text: str = Field(sa_column=Column(Text, nullable=False))

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
