"""NiceGUI chat interface for the session-based chat backend."""

import os
from collections.abc import Awaitable

from nicegui import app, ui

from src.client.api_client import close_api_client, get_api_client
from src.client.app_state import ChatAppState
from src.client.theme import load_theme, save_theme
from src.models.schemas import MODEL_CHOICES, Message, Theme
from src.ui.formatting import (
    bubble_classes,
    format_timestamp,
    send_button_label,
    theme_button_label,
)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    .header { background: linear-gradient(135deg, #2563eb 0%, #1d4ed8 100%); }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .body--dark .app-container { background: #1f2937; }

    .session-row:hover { background: #f3f4f6; }
    .session-active, .session-active:hover { background: #dbeafe; }
    .body--dark .session-row:hover { background: #374151; }
    .body--dark .session-active, .body--dark .session-active:hover { background: #1e3a8a; }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-reply {
        background: #e5e7eb;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .body--dark .message-reply { background: #374151; color: white; }
</style>
"""

app.on_shutdown(close_api_client)


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    state = ChatAppState(get_api_client(), theme=load_theme(app.storage.user))
    dark = ui.dark_mode(state.theme is Theme.DARK)

    scroll: ui.scroll_area
    theme_button: ui.button

    def notify_error() -> None:
        if state.last_error:
            ui.notify(state.last_error, type="negative")
            state.last_error = None

    async def apply(action: Awaitable[object]) -> None:
        """Run a state action, surface its failure, and re-render."""
        await action
        notify_error()
        session_list.refresh()
        message_list.refresh()

    async def send() -> None:
        await apply(state.send_message())
        scroll.scroll_to(percent=1.0)

    async def select(session_id: int) -> None:
        if state.editing_session_id == session_id:
            return
        await apply(state.select_session(session_id))

    async def confirm_delete(session_id: int) -> None:
        if await delete_dialog:
            await apply(state.delete_session(session_id))

    def toggle_theme() -> None:
        theme = state.toggle_theme()
        save_theme(app.storage.user, theme)
        dark.set_value(theme is Theme.DARK)
        theme_button.set_text(theme_button_label(theme))

    def render_message(message: Message) -> None:
        align, bubble = bubble_classes(message)
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.label(message.text).classes("text-sm leading-relaxed whitespace-pre-wrap")
                ui.label(format_timestamp(message.timestamp)).classes(
                    f"text-[10px] text-gray-400 {'self-end' if message.is_user else 'self-start'}"
                )

    def render_empty(icon: str, text: str) -> None:
        with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
            ui.icon(icon).classes("text-5xl text-gray-300")
            ui.label(text).classes("text-lg text-gray-400")

    @ui.refreshable
    def message_list() -> None:
        if state.active_session_id is None:
            render_empty("chat_bubble_outline", "No active session. Start a new chat.")
        elif not state.history:
            render_empty("forum", "No messages yet. Start chatting!")
        else:
            for message in state.history:
                render_message(message)

    @ui.refreshable
    def session_list() -> None:
        for session in state.sessions:
            active = "session-active" if session.id == state.active_session_id else ""
            with (
                ui.row()
                .classes(f"session-row {active} w-full items-center no-wrap gap-1 px-2 py-1 rounded-lg cursor-pointer")
                .on("click", lambda s=session: select(s.id))
            ):
                if state.editing_session_id == session.id:
                    (
                        ui.input()
                        .bind_value(state, "edit_name")
                        .props("dense autofocus")
                        .classes("flex-grow")
                        .on("keydown.enter", lambda s=session: apply(state.rename_session(s.id)))
                        .on("blur", lambda s=session: apply(state.rename_session(s.id)))
                    )
                else:
                    ui.label(session.name).classes("flex-grow truncate")
                ui.button(icon="edit").props("flat dense round size=sm").on(
                    "click.stop", lambda s=session: apply(state.toggle_editing(s.id))
                )
                ui.button(icon="delete").props("flat dense round size=sm color=negative").on(
                    "click.stop", lambda s=session: confirm_delete(s.id)
                )

    # === UI Layout ===
    with ui.dialog() as delete_dialog, ui.card():
        ui.label("Are you sure you want to delete this session?")
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=lambda: delete_dialog.submit(False)).props("flat")
            ui.button("Delete", on_click=lambda: delete_dialog.submit(True)).props("color=negative")

    # Header
    with ui.header().classes("header items-center justify-between px-4 py-2"):
        with ui.row().classes("items-center gap-2"):
            ui.button(icon="menu", on_click=lambda: drawer.toggle()).props("flat round color=white")
            ui.label("Chat").classes("text-lg font-semibold text-white")
        with ui.row().classes("items-center gap-3"):
            ui.select(
                MODEL_CHOICES,
                value=state.selected_model,
                on_change=lambda e: state.select_model(e.value),
            ).props("dense dark borderless options-dense").classes("w-44 text-white")
            theme_button = ui.button(theme_button_label(state.theme), on_click=toggle_theme).props(
                "flat color=white"
            )

    # Sidebar, collapses into an overlay below the md breakpoint
    with ui.left_drawer(bordered=True).props("width=280 breakpoint=768").classes("p-4") as drawer:
        ui.button("New Chat", on_click=lambda: apply(state.new_chat())).classes("w-full")
        with ui.column().classes("w-full gap-1 mt-4"):
            session_list()
        ui.button("Close", on_click=lambda: drawer.hide()).props("flat").classes("mt-4 md:hidden")

    # Messages and composer
    with ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
        "height: calc(100vh - 6rem)"
    ):
        with ui.scroll_area().classes("flex-grow w-full") as scroll, ui.column().classes("w-full p-5 gap-4"):
            message_list()

        with ui.row().classes("w-full p-4 gap-3 items-center no-wrap border-t"):
            (
                ui.input(placeholder="Type a message...")
                .bind_value(state, "composer_text")
                .bind_enabled_from(state, "active_session_id", lambda s: s is not None)
                .props("outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send)
            )
            (
                ui.button(on_click=send)
                .bind_text_from(state, "is_sending", send_button_label)
                .bind_enabled_from(state, "can_send")
            )
            (
                ui.button(icon="delete_sweep", on_click=lambda: apply(state.clear_history()))
                .props("flat round")
                .bind_enabled_from(state, "can_send")
                .tooltip("Clear history")
            )

    await ui.context.client.connected()
    await apply(state.load())


def main() -> None:
    ui.run(
        title="Chat",
        port=8080,
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-client-secret"),
    )


if __name__ == "__main__":
    main()
