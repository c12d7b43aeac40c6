"""Test package for the chat client.

Structure:
    - unit/: Configuration, API client, application state and helpers
    - integration/: Client and state driven against the development backend

Integration tests run the real FastAPI development backend in-process through
httpx.ASGITransport. No network access is needed.
Leverages pytest with pytest-check for soft assertions.
"""
