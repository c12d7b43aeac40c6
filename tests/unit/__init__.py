"""Unit tests for individual components in isolation.

Coverage:
    - client/: Config validation, request shapes, error wrapping, state transitions
    - ui/: Presentation helpers

Backend calls are replaced with httpx.MockTransport or AsyncMock.
Leverages pytest-check for multiple assertions per test.
"""
