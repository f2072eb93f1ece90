"""Clipboard sync API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from clipconnect.api.deps import get_relay
from clipconnect.schemas.relay import ErrorResponse, LatestResponse, SuccessResponse, SyncRequest
from clipconnect.services.clipboard_relay import ClipboardRelay

router = APIRouter(tags=["clipboard"])


@router.post(
    "/sync",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def sync(request: SyncRequest, relay: ClipboardRelay = Depends(get_relay)):
    """Push a clipboard entry to a session."""
    relay.sync(request.session_id, request.clip, request.from_device)
    return SuccessResponse()


def _latest_response(result: dict) -> LatestResponse:
    return LatestResponse(
        content=result["content"],
        clip=result["content"],
        from_device=result["from_device"],
        timestamp=result["timestamp"],
    )


@router.get(
    "/latest",
    response_model=LatestResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def latest(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    relay: ClipboardRelay = Depends(get_relay),
):
    """Get the most recent clipboard entry (session id in the query string)."""
    return _latest_response(relay.latest(session_id))


@router.get(
    "/latest/{session_id}",
    response_model=LatestResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
)
def latest_by_path(session_id: str, relay: ClipboardRelay = Depends(get_relay)):
    """Get the most recent clipboard entry (session id in the path)."""
    return _latest_response(relay.latest(session_id))
