"""Session and clipboard request/response schemas.

Wire names are camelCase to stay compatible with existing mobile clients.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Sessions ---

class CreateSessionResponse(CamelModel):
    session_id: str
    code: str
    aes_key: Optional[str] = None  # key mode only


class JoinSessionRequest(CamelModel):
    code: str
    device_id: Optional[str] = None


class JoinSessionResponse(CamelModel):
    session_id: str
    aes_key: Optional[str] = None


class EndSessionRequest(CamelModel):
    session_id: str


# --- Clipboard ---

class SyncRequest(CamelModel):
    session_id: str
    clip: str
    from_device: Optional[str] = None


class LatestResponse(CamelModel):
    content: str
    clip: str = Field(description="Same value as content, for older clients")
    from_device: Optional[str] = None
    timestamp: datetime


class SuccessResponse(CamelModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
