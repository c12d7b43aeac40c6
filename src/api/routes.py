"""Development backend endpoints for sessions and messages.

Implements the HTTP contract the chat client consumes, backed by the
in-memory ChatStore.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.api.store import ChatStore, SessionNotFoundError, get_chat_store
from src.models.schemas import (
    MODEL_CHOICES,
    ChatSession,
    Message,
    RenameRequest,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

Store = Annotated[ChatStore, Depends(get_chat_store)]


def _not_found(e: SessionNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _validate_model(model: str) -> str:
    """Validate that the model id is one the backend serves.

    Raises:
        HTTPException: 422 if the model is unknown.
    """
    if model not in MODEL_CHOICES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=f"Unknown model '{model}'",
        )
    return model


@router.get("/sessions", response_model=list[ChatSession])
async def list_sessions(store: Store) -> list[ChatSession]:
    return store.list_sessions()


@router.post("/new", response_model=ChatSession)
async def create_session(store: Store) -> ChatSession:
    return store.create_session()


@router.put("/sessions/{session_id}", response_model=ChatSession)
async def rename_session(session_id: int, request: RenameRequest, store: Store) -> ChatSession:
    """Rename a session.

    Raises:
        404: Unknown session.
        422: Blank name.
    """
    try:
        return store.rename_session(session_id, request.name)
    except SessionNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, store: Store) -> Response:
    try:
        store.delete_session(session_id)
    except SessionNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}/history", response_model=list[Message])
async def get_history(session_id: int, store: Store) -> list[Message]:
    try:
        return store.history(session_id)
    except SessionNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{session_id}/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(session_id: int, store: Store) -> Response:
    try:
        store.clear_history(session_id)
    except SessionNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}", response_model=Message)
async def send_message(
    session_id: int,
    request: SendMessageRequest,
    store: Store,
    model: Annotated[str, Query()] = "blenderbot",
) -> Message:
    """Store a user message and return the bot's reply.

    Args:
        session_id: Target session.
        request: Message payload.
        model: Model id selected by the client.

    Raises:
        404: Unknown session.
        422: Blank message or unknown model.
    """
    _validate_model(model)
    try:
        reply = store.post_message(session_id, request.message, model)
    except SessionNotFoundError as e:
        raise _not_found(e) from e
    logger.info(f"Replied in session {session_id} with model {model}")
    return reply
