"""Unit tests for ChatAppState.

The backend client is an AsyncMock, so each test controls exactly what the
backend returns and can check which requests were (or were not) made.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_check as check

from src.client.api_client import ChatApiClient, ChatApiError
from src.client.app_state import ChatAppState
from src.client.config import ClientConfig
from src.models.schemas import ChatSession, Message, Sender, Theme

NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def make_session(session_id: int, name: str | None = None) -> ChatSession:
    return ChatSession(id=session_id, name=name or f"Chat {session_id}", timestamp=NOW)


def make_message(message_id: int, sender: Sender, text: str) -> Message:
    return Message(id=message_id, sender=sender, text=text, timestamp=NOW)


@pytest.fixture
def api() -> AsyncMock:
    mock = AsyncMock(spec=ChatApiClient)
    mock.list_sessions.return_value = []
    mock.fetch_history.return_value = []
    return mock


def make_state(api: AsyncMock, auto_create: bool = True) -> ChatAppState:
    config = ClientConfig(
        api_base_url="http://backend.test/chat",
        default_model="blenderbot",
        auto_create_session=auto_create,
    )
    return ChatAppState(api, config=config)


def with_sessions(state: ChatAppState, *ids: int, active: int | None = None) -> ChatAppState:
    state.sessions = [make_session(i) for i in ids]
    state.active_session_id = active
    return state


class TestLoad:
    """Tests for the initial page load."""

    async def test_empty_directory_creates_one_active_session(self, api: AsyncMock) -> None:
        """Creating a session when the directory is empty activates exactly that session."""
        api.list_sessions.side_effect = [[], [make_session(1)]]
        api.create_session.return_value = make_session(1)
        state = make_state(api)

        await state.load()

        check.equal(api.create_session.await_count, 1)
        check.equal([s.id for s in state.sessions], [1])
        check.equal(state.active_session_id, 1)
        api.fetch_history.assert_awaited_with(1)

    async def test_empty_directory_without_auto_create(self, api: AsyncMock) -> None:
        state = make_state(api, auto_create=False)

        await state.load()

        check.is_none(state.active_session_id)
        check.equal(state.history, [])
        api.create_session.assert_not_awaited()
        api.fetch_history.assert_not_awaited()

    async def test_existing_sessions_activate_first(self, api: AsyncMock) -> None:
        api.list_sessions.return_value = [make_session(4), make_session(7)]
        api.fetch_history.return_value = [make_message(1, Sender.USER, "hi")]
        state = make_state(api)

        await state.load()

        check.equal(state.active_session_id, 4)
        check.equal(len(state.history), 1)
        api.create_session.assert_not_awaited()

    async def test_load_failure_is_logged_and_state_kept(self, api: AsyncMock) -> None:
        api.list_sessions.side_effect = ChatApiError("Failed to fetch sessions: HTTP 500")
        state = make_state(api)

        await state.load()

        check.equal(state.sessions, [])
        check.is_none(state.active_session_id)
        check.equal(state.last_error, "Failed to fetch sessions: HTTP 500")
        api.create_session.assert_not_awaited()


class TestDirectory:
    """Tests for selecting, creating and refreshing sessions."""

    async def test_refresh_drops_dangling_active_session(self, api: AsyncMock) -> None:
        """A session removed server-side cannot stay active."""
        state = with_sessions(make_state(api), 1, 2, active=1)
        state.history = [make_message(1, Sender.USER, "old")]
        api.list_sessions.return_value = [make_session(2)]

        assert await state.refresh_sessions()

        check.equal(state.active_session_id, 2)
        check.equal(state.history, [])

    async def test_select_session_loads_history(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.fetch_history.return_value = [make_message(5, Sender.BOT, "hello")]

        assert await state.select_session(2)

        check.equal(state.active_session_id, 2)
        check.equal([m.id for m in state.history], [5])
        api.fetch_history.assert_awaited_once_with(2)

    async def test_select_unknown_session_is_rejected(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)

        assert not await state.select_session(99)

        check.equal(state.active_session_id, 1)
        api.fetch_history.assert_not_awaited()

    async def test_failed_history_fetch_does_not_show_previous_session(
        self, api: AsyncMock
    ) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        state.history = [make_message(1, Sender.USER, "from session 1")]
        api.fetch_history.side_effect = ChatApiError("Failed to fetch messages: HTTP 500")

        assert not await state.select_session(2)

        check.equal(state.active_session_id, 2)
        check.equal(state.history, [])
        check.is_not_none(state.last_error)

    async def test_new_chat_activates_created_session(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.create_session.return_value = make_session(2)
        api.list_sessions.return_value = [make_session(1), make_session(2)]

        created = await state.new_chat()

        check.equal(created.id, 2)
        check.equal(state.active_session_id, 2)
        api.fetch_history.assert_awaited_with(2)

    async def test_new_chat_failure_leaves_state(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.create_session.side_effect = ChatApiError("Failed to create new chat: HTTP 503")

        assert await state.new_chat() is None

        check.equal(state.active_session_id, 1)
        check.equal([s.id for s in state.sessions], [1])
        api.list_sessions.assert_not_awaited()


class TestRename:
    """Tests for the rename editing flow."""

    def test_start_editing_copies_current_name(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)

        state.start_editing(1)

        check.equal(state.editing_session_id, 1)
        check.equal(state.edit_name, "Chat 1")

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_blank_name_sends_nothing_and_exits_editing(
        self, api: AsyncMock, name: str
    ) -> None:
        """Renaming with an empty or whitespace name is a no-op."""
        state = with_sessions(make_state(api), 1, active=1)
        state.start_editing(1)
        state.edit_name = name

        assert not await state.rename_session(1)

        api.rename_session.assert_not_awaited()
        check.is_none(state.editing_session_id)
        check.equal(state.sessions[0].name, "Chat 1")

    async def test_rename_commits_and_refetches(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.list_sessions.return_value = [make_session(1, "Holiday plans")]
        state.start_editing(1)
        state.edit_name = " Holiday plans "

        assert await state.rename_session(1)

        api.rename_session.assert_awaited_once_with(1, "Holiday plans")
        api.list_sessions.assert_awaited_once()
        check.is_none(state.editing_session_id)
        check.equal(state.sessions[0].name, "Holiday plans")

    async def test_rename_failure_keeps_editing(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.rename_session.side_effect = ChatApiError("Failed to rename session: HTTP 500")
        state.start_editing(1)
        state.edit_name = "New"

        assert not await state.rename_session(1)

        check.equal(state.editing_session_id, 1)
        check.equal(state.edit_name, "New")
        api.list_sessions.assert_not_awaited()

    async def test_second_commit_is_ignored(self, api: AsyncMock) -> None:
        """Enter followed by blur sends a single rename."""
        state = with_sessions(make_state(api), 1, active=1)
        api.list_sessions.return_value = [make_session(1, "New")]
        state.start_editing(1)
        state.edit_name = "New"

        await state.rename_session(1)
        await state.rename_session(1)

        api.rename_session.assert_awaited_once()

    async def test_toggle_editing_starts_then_commits(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.list_sessions.return_value = [make_session(1, "Work")]

        await state.toggle_editing(1)
        check.equal(state.editing_session_id, 1)
        state.edit_name = "Work"
        await state.toggle_editing(1)

        api.rename_session.assert_awaited_once_with(1, "Work")
        check.is_none(state.editing_session_id)


class TestDelete:
    """Tests for deletion and the active-session fallback."""

    async def test_deleting_active_selects_another_session(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.list_sessions.return_value = [make_session(2)]

        assert await state.delete_session(1)

        api.delete_session.assert_awaited_once_with(1)
        check.equal(state.active_session_id, 2)
        api.fetch_history.assert_awaited_with(2)
        api.create_session.assert_not_awaited()

    async def test_deleting_inactive_keeps_active(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.list_sessions.return_value = [make_session(1)]

        assert await state.delete_session(2)

        check.equal(state.active_session_id, 1)
        api.fetch_history.assert_not_awaited()

    async def test_deleting_last_session_creates_replacement(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        api.list_sessions.side_effect = [[], [make_session(2)]]
        api.create_session.return_value = make_session(2)

        assert await state.delete_session(1)

        api.create_session.assert_awaited_once()
        check.equal(state.active_session_id, 2)
        check.equal([s.id for s in state.sessions], [2])

    async def test_deleting_last_session_without_auto_create(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api, auto_create=False), 1, active=1)
        state.history = [make_message(1, Sender.USER, "bye")]

        assert await state.delete_session(1)

        check.is_none(state.active_session_id)
        check.equal(state.history, [])
        check.is_false(state.can_send)
        api.create_session.assert_not_awaited()

    async def test_failed_refetch_never_leaves_deleted_id_active(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.list_sessions.side_effect = ChatApiError("Failed to fetch sessions: HTTP 502")

        assert await state.delete_session(1)

        check.equal([s.id for s in state.sessions], [2])
        check.equal(state.active_session_id, 2)

    async def test_delete_failure_leaves_state(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.delete_session.side_effect = ChatApiError("Failed to delete session: HTTP 500")

        assert not await state.delete_session(1)

        check.equal([s.id for s in state.sessions], [1, 2])
        check.equal(state.active_session_id, 1)
        api.list_sessions.assert_not_awaited()

    async def test_deleting_edited_session_cancels_editing(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, 2, active=1)
        api.list_sessions.return_value = [make_session(1)]
        state.start_editing(2)

        await state.delete_session(2)

        check.is_none(state.editing_session_id)
        check.equal(state.edit_name, "")


class TestComposer:
    """Tests for sending messages."""

    async def test_send_without_active_session_is_rejected(self, api: AsyncMock) -> None:
        state = make_state(api)
        state.composer_text = "hello"

        assert not await state.send_message()

        api.send_message.assert_not_awaited()
        check.equal(state.composer_text, "hello")

    async def test_blank_text_is_not_sent(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        state.composer_text = "   "

        assert not await state.send_message()

        api.send_message.assert_not_awaited()

    async def test_successful_send_clears_composer_and_refetches(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        state.select_model("blenderbot-smart")
        state.composer_text = " hello "
        history = [make_message(1, Sender.USER, " hello "), make_message(2, Sender.BOT, "hi")]
        api.send_message.return_value = history[1]
        api.fetch_history.return_value = history

        assert await state.send_message()

        api.send_message.assert_awaited_once_with(1, " hello ", "blenderbot-smart")
        api.fetch_history.assert_awaited_once_with(1)
        check.equal(state.composer_text, "")
        check.equal(state.history, history)
        check.is_false(state.is_sending)

    async def test_failed_send_keeps_composer_and_refetches(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        state.composer_text = "hello"
        api.send_message.side_effect = ChatApiError("Failed to send message: HTTP 500")

        assert not await state.send_message()

        check.equal(state.composer_text, "hello")
        check.equal(state.last_error, "Failed to send message: HTTP 500")
        check.is_false(state.is_sending)
        api.fetch_history.assert_awaited_once_with(1)

    async def test_send_in_flight_blocks_second_send(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        state.composer_text = "hello"
        observed: list[bool] = []

        async def send(*args: object) -> Message:
            observed.append(state.can_send)
            observed.append(await state.send_message())
            return make_message(2, Sender.BOT, "hi")

        api.send_message.side_effect = send

        assert await state.send_message()

        check.equal(observed, [False, False])
        api.send_message.assert_awaited_once()

    async def test_clear_history(self, api: AsyncMock) -> None:
        state = with_sessions(make_state(api), 1, active=1)
        state.history = [make_message(1, Sender.USER, "hello")]

        assert await state.clear_history()

        api.clear_history.assert_awaited_once_with(1)
        check.equal(state.history, [])

    async def test_clear_history_without_active_session(self, api: AsyncMock) -> None:
        state = make_state(api)

        assert not await state.clear_history()

        api.clear_history.assert_not_awaited()

    def test_select_unknown_model_raises(self, api: AsyncMock) -> None:
        state = make_state(api)

        with pytest.raises(ValueError, match="Unknown model"):
            state.select_model("gpt-4o")

        assert state.selected_model == "blenderbot"


class TestTheme:
    def test_toggle_theme_alternates(self, api: AsyncMock) -> None:
        state = make_state(api)

        check.equal(state.toggle_theme(), Theme.DARK)
        check.equal(state.toggle_theme(), Theme.LIGHT)
