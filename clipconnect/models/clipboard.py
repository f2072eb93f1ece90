"""Clipboard item model."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class ClipboardItem(SQLModel, table=True):
    __tablename__ = "clipboard_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)  # no FK: sessions are not checked on write
    content: str
    from_device: Optional[str] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
