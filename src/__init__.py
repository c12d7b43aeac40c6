"""Chat Client - browser chat UI for a session-based chat backend.

Combines NiceGUI for the browser interface, HTTPX for backend calls,
FastAPI for hosting and the development backend, and Pydantic for data
validation.

Components:
    - client: Backend API client, configuration and per-page state
    - ui: Web interface for sessions, history and the composer
    - api: Host application and in-memory development backend
    - models: Session and message schemas
"""

__version__ = "0.1.0"
