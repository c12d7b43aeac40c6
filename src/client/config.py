"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat backend client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from src.models.schemas import MODEL_CHOICES

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Configuration for talking to the chat backend.

    Attributes:
        api_base_url: Base URL every endpoint path is resolved against.
        default_model: Model id selected when a page opens.
        request_timeout: Seconds before a request is abandoned.
        auto_create_session: Create a session when the directory becomes empty.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000/chat"),
        description="Chat backend base URL",
    )
    default_model: str = Field(
        default_factory=lambda: os.getenv("CHAT_MODEL", "blenderbot"),
        description="Model id passed with each message",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "120")),
        gt=0.0,
        description="HTTP timeout in seconds",
    )
    auto_create_session: bool = Field(
        default_factory=lambda: _env_flag("AUTO_CREATE_SESSION", "true"),
        description="Auto-create a session when none exist",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("default_model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Only models the backend knows about can be selected."""
        if v not in MODEL_CHOICES:
            raise ValueError(
                f"Unknown model '{v}'. Choose one of: {', '.join(MODEL_CHOICES)}"
            )
        return v


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If an environment value is invalid.
    """
    return ClientConfig()
