"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Session sidebar with new, rename and delete actions
    - Message history display for the active session
    - Composer with model selection
    - Dark/light theme toggle persisted per user

Contains no request logic. Delegates every operation to ChatAppState.
"""
