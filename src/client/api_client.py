"""HTTP client for the chat backend.

Every backend call is a single request/response round trip with no retry.
All failures (bad status, transport errors, malformed bodies) surface as
ChatApiError so call sites only need to handle one kind of error.
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from src.client.config import ClientConfig, get_client_config
from src.models.schemas import ChatSession, Message, RenameRequest

logger = logging.getLogger(__name__)

_SESSION_LIST = TypeAdapter(list[ChatSession])
_MESSAGE_LIST = TypeAdapter(list[Message])


class ChatApiError(Exception):
    """Raised when a request to the chat backend fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str | None:
    """Read the `detail` field of an error body, if there is one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("detail"):
        detail = payload["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return None


class ChatApiClient:
    """Async client for the session and message endpoints.

    Wraps a single httpx.AsyncClient whose base URL and timeout come from
    ClientConfig. Pass `transport` to route requests somewhere other than the
    network (tests use httpx.MockTransport and httpx.ASGITransport).
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._client = httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._config.api_base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, action: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            detail = _error_detail(e.response)
            raise ChatApiError(
                f"Failed to {action}: {detail or f'HTTP {status_code}'}",
                status_code=status_code,
                detail=detail,
            ) from e
        except httpx.RequestError as e:
            raise ChatApiError(f"Failed to {action}: connection failed: {e}") from e
        return response

    @staticmethod
    def _parse(action: str, response: httpx.Response, adapter: Any) -> Any:
        try:
            return adapter(response.json())
        except ValueError as e:
            raise ChatApiError(f"Failed to {action}: unexpected response: {e}") from e

    async def list_sessions(self) -> list[ChatSession]:
        """Fetch the full session directory."""
        response = await self._request("fetch sessions", "GET", "/sessions")
        return self._parse("fetch sessions", response, _SESSION_LIST.validate_python)

    async def create_session(self) -> ChatSession:
        """Create a new, empty session."""
        response = await self._request("create new chat", "POST", "/new")
        return self._parse("create new chat", response, ChatSession.model_validate)

    async def rename_session(self, session_id: int, name: str) -> ChatSession:
        """Rename a session.

        Args:
            session_id: Session to rename.
            name: New display name. Blank names are rejected before sending.

        Returns:
            The updated session.

        Raises:
            ValueError: If the name is empty or whitespace-only.
            ChatApiError: If the request fails.
        """
        if not name or not name.strip():
            raise ValueError("Session name must not be empty")
        payload = RenameRequest(name=name)
        response = await self._request(
            "rename session", "PUT", f"/sessions/{session_id}", json=payload.model_dump()
        )
        return self._parse("rename session", response, ChatSession.model_validate)

    async def delete_session(self, session_id: int) -> None:
        await self._request("delete session", "DELETE", f"/sessions/{session_id}")

    async def fetch_history(self, session_id: int) -> list[Message]:
        """Fetch a session's messages in server order."""
        response = await self._request("fetch messages", "GET", f"/{session_id}/history")
        return self._parse("fetch messages", response, _MESSAGE_LIST.validate_python)

    async def clear_history(self, session_id: int) -> None:
        await self._request("clear history", "DELETE", f"/{session_id}/history")

    async def send_message(self, session_id: int, message: str, model: str) -> Message:
        """Post a message and wait for the generated reply.

        Args:
            session_id: Target session.
            message: Text to send, verbatim.
            model: Model id passed as the `model` query parameter.

        Returns:
            The reply message produced by the backend.
        """
        response = await self._request(
            "send message",
            "POST",
            f"/{session_id}",
            params={"model": model},
            json={"message": message},
        )
        return self._parse("send message", response, Message.model_validate)


# Module-level shared client
_api_client: ChatApiClient | None = None


def get_api_client() -> ChatApiClient:
    """Get or create the global API client.

    Created lazily so the underlying httpx client binds to the running loop.

    Returns:
        The ChatApiClient instance.
    """
    global _api_client
    if _api_client is None:
        _api_client = ChatApiClient()
        logger.info(f"Chat backend client targeting {_api_client.base_url}")
    return _api_client


async def close_api_client() -> None:
    """Close the global API client if one was created."""
    global _api_client
    if _api_client is not None:
        await _api_client.aclose()
        _api_client = None
