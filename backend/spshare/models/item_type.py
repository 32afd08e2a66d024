from sqlmodel import SQLModel, Field, Column

from .enums import IntEnumType, ItemType


class ItemTypeLimit(SQLModel, table=True):
    """Per-file size ceiling for one item type (space in MB)."""

    item_type: ItemType = Field(
        sa_column=Column(IntEnumType(ItemType), primary_key=True, autoincrement=False)
    )
    name: str = Field(max_length=20)
    max_item_count: int = Field(default=0)
    max_item_space: float
