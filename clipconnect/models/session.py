"""Pairing session and device roster models."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class RelaySession(SQLModel, table=True):
    __tablename__ = "sessions"

    id: str = Field(default_factory=lambda: f"ses_{secrets.token_hex(8)}", primary_key=True)
    code: str = Field(unique=True, index=True)  # 6-char pairing code
    key_material: Optional[str] = None  # base64, key mode only
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class SessionDevice(SQLModel, table=True):
    __tablename__ = "session_devices"
    __table_args__ = (UniqueConstraint("session_id", "device_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    device_id: str
    joined_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
