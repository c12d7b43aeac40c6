"""In-memory session and message store for the development backend.

Holds everything in process memory; a restart starts from an empty
directory. Replies come from a deterministic echo responder so the client
can be exercised without a model server.
"""

import logging
from datetime import datetime, timezone

from src.models.schemas import MODEL_CHOICES, ChatSession, Message, Sender

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session id is not in the store."""

    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_reply(message: str, model: str) -> str:
    """Produce the bot's reply for a message.

    Args:
        message: The user's message.
        model: Model id the client selected.

    Returns:
        Reply text tagged with the model's display label.
    """
    label = MODEL_CHOICES.get(model, model)
    return f"[{label}] You said: {message.strip()}"


class ChatStore:
    """Sessions and their histories, keyed by numeric id."""

    def __init__(self) -> None:
        self._sessions: dict[int, ChatSession] = {}
        self._messages: dict[int, list[Message]] = {}
        self._next_session_id = 1
        self._next_message_id = 1

    def _get(self, session_id: int) -> ChatSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session {session_id} not found") from None

    def _touch(self, session_id: int) -> None:
        session = self._sessions[session_id]
        self._sessions[session_id] = session.model_copy(update={"timestamp": _now()})

    def _add_message(self, session_id: int, sender: Sender, text: str) -> Message:
        message = Message(
            id=self._next_message_id,
            sender=sender,
            text=text,
            timestamp=_now(),
        )
        self._next_message_id += 1
        self._messages[session_id].append(message)
        return message

    def list_sessions(self) -> list[ChatSession]:
        return sorted(self._sessions.values(), key=lambda s: s.id)

    def create_session(self) -> ChatSession:
        session_id = self._next_session_id
        self._next_session_id += 1
        session = ChatSession(id=session_id, name=f"Chat {session_id}", timestamp=_now())
        self._sessions[session_id] = session
        self._messages[session_id] = []
        logger.info(f"Created session {session_id}")
        return session

    def rename_session(self, session_id: int, name: str) -> ChatSession:
        session = self._get(session_id).model_copy(update={"name": name, "timestamp": _now()})
        self._sessions[session_id] = session
        return session

    def delete_session(self, session_id: int) -> None:
        self._get(session_id)
        del self._sessions[session_id]
        del self._messages[session_id]
        logger.info(f"Deleted session {session_id}")

    def history(self, session_id: int) -> list[Message]:
        self._get(session_id)
        return list(self._messages[session_id])

    def clear_history(self, session_id: int) -> None:
        self._get(session_id)
        self._messages[session_id].clear()

    def post_message(self, session_id: int, text: str, model: str) -> Message:
        """Store the user's message and the generated reply.

        Returns:
            The reply message.
        """
        self._get(session_id)
        self._add_message(session_id, Sender.USER, text)
        reply = self._add_message(session_id, Sender.BOT, generate_reply(text, model))
        self._touch(session_id)
        return reply


# Module-level singleton instance
_chat_store: ChatStore | None = None


def get_chat_store() -> ChatStore:
    """Get or create the global chat store.

    Returns:
        The ChatStore instance.
    """
    global _chat_store
    if _chat_store is None:
        _chat_store = ChatStore()
    return _chat_store
