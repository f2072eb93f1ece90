"""Session lifecycle API endpoints."""

from fastapi import APIRouter, Depends

from clipconnect.api.deps import get_registry
from clipconnect.schemas.relay import (
    CreateSessionResponse,
    EndSessionRequest,
    ErrorResponse,
    JoinSessionRequest,
    JoinSessionResponse,
    SuccessResponse,
)
from clipconnect.services.session_registry import SessionRegistry

router = APIRouter(tags=["sessions"])


@router.post(
    "/create-session",
    response_model=CreateSessionResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
def create_session(registry: SessionRegistry = Depends(get_registry)):
    """Create a session and return its pairing code (and key, in key mode)."""
    result = registry.create_session()
    return CreateSessionResponse(
        session_id=result["session_id"],
        code=result["code"],
        aes_key=result.get("key_material"),
    )


@router.post(
    "/join-session",
    response_model=JoinSessionResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def join_session(request: JoinSessionRequest, registry: SessionRegistry = Depends(get_registry)):
    """Join a session by its pairing code."""
    result = registry.join_session(request.code, request.device_id)
    return JoinSessionResponse(
        session_id=result["session_id"],
        aes_key=result.get("key_material"),
    )


@router.post(
    "/end-session",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def end_session(request: EndSessionRequest, registry: SessionRegistry = Depends(get_registry)):
    """End a session and delete its clipboard items."""
    registry.end_session(request.session_id)
    return SuccessResponse()
