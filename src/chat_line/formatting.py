from io import StringIO
from typing import Optional

from rich.console import Console
from rich.text import Text

from chat_line.api import Message
from chat_line.config import DisplaySettings


class MessageFormatter:
    """Renders messages as `<sender>: text` lines, styled with rich."""

    def __init__(self, settings: Optional[DisplaySettings] = None):
        self._settings = settings if settings is not None else DisplaySettings()
        # sender and text are caller supplied, so they go through Text and never through markup
        self._console = Console(
            file=StringIO(),
            force_terminal=self._settings.color,
            color_system="standard" if self._settings.color else None,
            soft_wrap=True,
            highlight=False,
            emoji=False,
        )

    def format(self, message: Message) -> str:
        sender = message.sender if message.sender is not None else self._settings.unknown_sender
        line = Text()
        line.append(f"<{sender}>", style=self._settings.sender_style or None)
        line.append(": ")
        line.append(message.text, style=self._settings.text_style or None)
        with self._console.capture() as capture:
            self._console.print(line, end="")
        return capture.get()
