from sqlmodel import SQLModel, Field, Column
from sqlalchemy import BigInteger, Text
from datetime import datetime
from typing import Optional

from .enums import IntEnumType, ItemType


class Item(SQLModel, table=True):
    """Metadata of an uploaded picture or video."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=30)
    description: str = Field(sa_column=Column(Text, nullable=False))
    item_type: ItemType = Field(
        sa_column=Column(IntEnumType(ItemType), nullable=False, index=True)
    )

    # File information
    size_bytes: int = Field(sa_column=Column(BigInteger, nullable=False))
    path: str = Field(max_length=255)
    # False until the bytes are written; only uploaded items count toward limits
    uploaded: bool = Field(default=False, index=True)

    # Associations
    group_id: int = Field(foreign_key="group.id", index=True)
    created_by: int = Field(foreign_key="user.id", index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    last_accessed: Optional[datetime] = Field(default=None)
