from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

# Model id -> display label, in the order the selector shows them
MODEL_CHOICES: dict[str, str] = {
    "blenderbot": "BlenderBot (Light)",
    "blenderbot-smart": "BlenderBot (Smart)",
}


class Sender(str, Enum):
    """Sender roles a message can carry."""

    USER = "user"
    ASSISTANT = "assistant"
    BOT = "bot"


class Theme(str, Enum):
    """Color theme preference."""

    LIGHT = "light"
    DARK = "dark"


class ChatSession(BaseModel):
    """A named conversation thread owned by the backend.

    Attributes:
        id: Server-assigned numeric identifier.
        name: Display name, mutable by rename.
        timestamp: Creation or last-touched time.
    """

    id: int
    name: str
    timestamp: datetime


class Message(BaseModel):
    """A single turn in a session.

    Attributes:
        id: Server-assigned numeric identifier.
        sender: Who wrote the message.
        text: Message body.
        timestamp: When the backend recorded the message.
    """

    id: int
    sender: Sender
    text: str
    timestamp: datetime

    @property
    def is_user(self) -> bool:
        return self.sender is Sender.USER


class RenameRequest(BaseModel):
    """Request payload for renaming a session."""

    name: str = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from name before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class SendMessageRequest(BaseModel):
    """Request payload for posting a message to a session.

    The text is kept verbatim; only blank messages are rejected.
    """

    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v
