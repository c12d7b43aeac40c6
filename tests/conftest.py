"""Pytest fixtures and shared test configuration.

Fixtures:
    - chat_store: Fresh in-memory store for the development backend
    - backend_app: FastAPI app with the development backend bound to chat_store
    - client_config: ClientConfig pointing at the in-process backend
    - async_client: HTTPX client for raw endpoint tests
    - api_client: ChatApiClient routed to the in-process backend
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.store import ChatStore, get_chat_store
from src.client.api_client import ChatApiClient
from src.client.config import ClientConfig


@pytest.fixture
def chat_store() -> ChatStore:
    """Return an empty store so tests never share sessions."""
    return ChatStore()


@pytest.fixture
def backend_app(chat_store: ChatStore) -> FastAPI:
    """Create the host app with the development backend mounted.

    Args:
        chat_store: Store injected in place of the global singleton.

    Returns:
        FastAPI application serving /chat from chat_store.
    """
    app = create_app(include_dev_backend=True)
    app.dependency_overrides[get_chat_store] = lambda: chat_store
    return app


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        api_base_url="http://test/chat",
        default_model="blenderbot",
        request_timeout=5.0,
        auto_create_session=True,
    )


@pytest.fixture
async def async_client(backend_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for raw endpoint testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=backend_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def api_client(
    backend_app: FastAPI, client_config: ClientConfig
) -> AsyncGenerator[ChatApiClient]:
    """Create a ChatApiClient that talks to the in-process backend.

    Yields:
        ChatApiClient bound to backend_app.
    """
    transport = ASGITransport(app=backend_app)
    async with ChatApiClient(config=client_config, transport=transport) as client:
        yield client
