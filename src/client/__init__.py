"""Chat backend client and per-page application state.

Responsibilities:
    - HTTP calls for the session directory and message history
    - Client configuration loaded from the environment
    - Explicit application state (active session, composer, theme)
    - Theme preference persistence

Contains no UI code. The ui package renders whatever the state holds.
"""

from src.client.api_client import ChatApiClient, ChatApiError, get_api_client
from src.client.app_state import ChatAppState
from src.client.config import ClientConfig, get_client_config

__all__ = [
    "ChatApiClient",
    "ChatApiError",
    "ChatAppState",
    "ClientConfig",
    "get_api_client",
    "get_client_config",
]
