"""Integration tests for components working together as a system.

No mocks for core functionality - the client talks to the real development
backend over ASGI.

Coverage:
    - Development backend endpoints with real HTTP requests
    - ChatApiClient and ChatAppState flows end to end
"""
