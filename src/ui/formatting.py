"""Presentation helpers for the chat view."""

from datetime import datetime

from src.models.schemas import Message, Theme


def format_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as local clock time, e.g. '03:04 PM'."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime("%I:%M %p")


def bubble_classes(message: Message) -> tuple[str, str]:
    """Row alignment and bubble CSS class for a message."""
    if message.is_user:
        return "justify-end", "message-user"
    return "justify-start", "message-reply"


def theme_button_label(theme: Theme) -> str:
    """Label of the theme toggle, naming the theme it switches to."""
    return "Dark Mode" if theme is Theme.LIGHT else "Light Mode"


def send_button_label(is_sending: bool) -> str:
    return "Sending..." if is_sending else "Send"
