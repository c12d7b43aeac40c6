"""Per-page application state for the chat client.

One ChatAppState is created for each browser page and handed to the view
builders. It owns the session directory, the active session, the message
history, the composer and the theme. Every backend call goes through the
ChatApiClient; failures are caught here, logged, and leave the state as it
was before the call.

Invariant: `active_session_id` is either None or the id of a session in
`sessions`.
"""

import logging

from src.client.api_client import ChatApiClient, ChatApiError
from src.client.config import ClientConfig, get_client_config
from src.models.schemas import MODEL_CHOICES, ChatSession, Message, Theme

logger = logging.getLogger(__name__)


class ChatAppState:
    """Explicit state for one chat page.

    Attributes:
        sessions: Session directory as last fetched from the backend.
        active_session_id: Session currently displayed, or None.
        history: Messages of the active session, in server order.
        composer_text: Pending input text.
        selected_model: Model id sent with each message.
        is_sending: True while a send is in flight.
        editing_session_id: Session whose name is being edited, or None.
        edit_name: Edit buffer for the session being renamed.
        theme: Current color theme.
        last_error: Message of the most recent failed request.
    """

    def __init__(
        self,
        api: ChatApiClient,
        config: ClientConfig | None = None,
        theme: Theme = Theme.LIGHT,
    ) -> None:
        self._api = api
        self._config = config or get_client_config()
        self.sessions: list[ChatSession] = []
        self.active_session_id: int | None = None
        self.history: list[Message] = []
        self.composer_text: str = ""
        self.selected_model: str = self._config.default_model
        self.is_sending: bool = False
        self.editing_session_id: int | None = None
        self.edit_name: str = ""
        self.theme: Theme = theme
        self.last_error: str | None = None

    @property
    def active_session(self) -> ChatSession | None:
        return next((s for s in self.sessions if s.id == self.active_session_id), None)

    @property
    def can_send(self) -> bool:
        """Whether the composer accepts a submission right now."""
        return self.active_session_id is not None and not self.is_sending

    def _fail(self, action: str, error: ChatApiError) -> None:
        logger.error(f"Error while trying to {action}: {error}")
        self.last_error = str(error)

    def _reconcile_active(self) -> None:
        """Point the active id at an existing session, or clear it."""
        ids = {s.id for s in self.sessions}
        if self.editing_session_id is not None and self.editing_session_id not in ids:
            self.cancel_editing()
        if self.active_session_id in ids:
            return
        previous = self.active_session_id
        self.active_session_id = self.sessions[0].id if self.sessions else None
        self.history = []
        logger.debug(f"Active session changed from {previous} to {self.active_session_id}")

    # === Session directory ===

    async def load(self) -> None:
        """Initial page load: fetch the directory and pick or create a session."""
        if not await self.refresh_sessions():
            return
        if not self.sessions and self._config.auto_create_session:
            await self.new_chat()
            return
        await self.refresh_history()

    async def refresh_sessions(self) -> bool:
        """Refetch the whole session directory."""
        try:
            sessions = await self._api.list_sessions()
        except ChatApiError as e:
            self._fail("fetch sessions", e)
            return False
        self.sessions = sessions
        self._reconcile_active()
        return True

    async def select_session(self, session_id: int) -> bool:
        """Make a session active and load its history."""
        if session_id not in {s.id for s in self.sessions}:
            logger.warning(f"Cannot select unknown session {session_id}")
            return False
        if session_id != self.active_session_id:
            self.active_session_id = session_id
            self.history = []
        return await self.refresh_history()

    async def new_chat(self) -> ChatSession | None:
        """Create a session, refetch the directory and activate the new session."""
        try:
            created = await self._api.create_session()
        except ChatApiError as e:
            self._fail("create new chat", e)
            return None
        logger.info(f"Created session {created.id} ({created.name})")

        await self.refresh_sessions()
        if created.id in {s.id for s in self.sessions}:
            self.active_session_id = created.id
            self.history = []
        await self.refresh_history()
        return created

    def start_editing(self, session_id: int) -> None:
        session = next((s for s in self.sessions if s.id == session_id), None)
        if session is None:
            return
        self.editing_session_id = session_id
        self.edit_name = session.name

    def cancel_editing(self) -> None:
        self.editing_session_id = None
        self.edit_name = ""

    async def toggle_editing(self, session_id: int) -> None:
        """Edit button: start editing, or commit if this session is already being edited."""
        if self.editing_session_id == session_id:
            await self.rename_session(session_id)
        else:
            self.start_editing(session_id)

    async def rename_session(self, session_id: int, name: str | None = None) -> bool:
        """Commit a rename from the edit buffer (or `name` when given).

        Ignored when the session is not being edited, so enter followed by
        blur sends a single request. A blank name sends nothing and leaves
        editing mode.
        """
        if self.editing_session_id != session_id:
            return False
        new_name = (self.edit_name if name is None else name).strip()
        if not new_name:
            logger.debug(f"Rename of session {session_id} skipped: empty name")
            self.cancel_editing()
            return False

        try:
            await self._api.rename_session(session_id, new_name)
        except ChatApiError as e:
            self._fail("rename session", e)
            return False
        logger.info(f"Renamed session {session_id} to {new_name!r}")

        self.cancel_editing()
        await self.refresh_sessions()
        return True

    async def delete_session(self, session_id: int) -> bool:
        """Delete a session and fall back to another one.

        When the last session goes away a replacement is created if
        auto-create is enabled; otherwise no session stays active.
        """
        try:
            await self._api.delete_session(session_id)
        except ChatApiError as e:
            self._fail("delete session", e)
            return False
        logger.info(f"Deleted session {session_id}")

        was_active = self.active_session_id == session_id
        # Drop the id locally so a failed refetch cannot leave it active
        self.sessions = [s for s in self.sessions if s.id != session_id]
        self._reconcile_active()
        await self.refresh_sessions()

        if not self.sessions:
            if self._config.auto_create_session:
                await self.new_chat()
            return True
        if was_active:
            await self.refresh_history()
        return True

    # === Message history ===

    async def refresh_history(self) -> bool:
        """Refetch the active session's messages; empty when nothing is active."""
        session_id = self.active_session_id
        if session_id is None:
            self.history = []
            return True
        try:
            history = await self._api.fetch_history(session_id)
        except ChatApiError as e:
            self._fail("fetch messages", e)
            return False
        # Ignore a response for a session that is no longer active
        if session_id == self.active_session_id:
            self.history = history
        return True

    async def clear_history(self) -> bool:
        session_id = self.active_session_id
        if session_id is None:
            return False
        try:
            await self._api.clear_history(session_id)
        except ChatApiError as e:
            self._fail("clear history", e)
            return False
        logger.info(f"Cleared history of session {session_id}")
        await self.refresh_history()
        return True

    # === Composer ===

    def select_model(self, model: str) -> None:
        if model not in MODEL_CHOICES:
            raise ValueError(f"Unknown model: {model}")
        self.selected_model = model

    async def send_message(self) -> bool:
        """Submit the composer text to the active session.

        Nothing is sent for blank text, with no active session, or while
        another send is in flight. The composer is cleared only on success;
        history is refetched either way.
        """
        text = self.composer_text
        if not text.strip() or not self.can_send:
            logger.debug("Send rejected: empty text, no active session, or send in flight")
            return False

        session_id = self.active_session_id
        self.is_sending = True
        try:
            await self._api.send_message(session_id, text, self.selected_model)
        except ChatApiError as e:
            self._fail("send message", e)
            sent = False
        else:
            self.composer_text = ""
            sent = True
        finally:
            self.is_sending = False

        await self.refresh_history()
        return sent

    # === Theme ===

    def toggle_theme(self) -> Theme:
        self.theme = Theme.DARK if self.theme is Theme.LIGHT else Theme.LIGHT
        return self.theme
