"""Pydantic models shared by the chat client and the development backend.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatSession: Named conversation thread
    - Message: Single turn in a session with sender role and timestamp
    - RenameRequest: Payload for renaming a session
    - SendMessageRequest: Payload for posting a message
    - Sender, Theme: Enumerated roles and color themes
"""

from src.models.schemas import (
    MODEL_CHOICES,
    ChatSession,
    Message,
    RenameRequest,
    SendMessageRequest,
    Sender,
    Theme,
)

__all__ = [
    "MODEL_CHOICES",
    "ChatSession",
    "Message",
    "RenameRequest",
    "SendMessageRequest",
    "Sender",
    "Theme",
]
