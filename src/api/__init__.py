"""FastAPI host application and development chat backend.

Endpoints (development backend, mounted under /chat):
    - GET /sessions: Session directory
    - POST /new: Create a session
    - PUT /sessions/{id}: Rename a session
    - DELETE /sessions/{id}: Delete a session
    - GET /{id}/history: Messages of a session
    - DELETE /{id}/history: Clear a session's messages
    - POST /{id}?model=...: Send a message, returns the bot reply

Always:
    - GET /health: Service health status
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
