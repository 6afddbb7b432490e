from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional

logger = getLogger(__name__)


class ChatEvent(str, Enum):
    """Event kinds published by ChatChannel."""
    MESSAGE_SENT = "message-sent"
    MESSAGE_RECEIVED = "message-received"
    CLOSED = "closed"


@dataclass(frozen=True, eq=False)
class Message:
    """A single chat message, alive for one event dispatch.

    `sender` is an opaque label supplied by whoever built the message, `extra` is passed through untouched.
    """
    text: str
    sender: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None


LineHandler = Callable[[str], None]
CloseHandler = Callable[[], None]


class LineSource(ABC):
    """Owns the interactive prompt and turns user input into line notifications."""

    def __init__(self):
        self._line_handlers: List[LineHandler] = []
        self._close_handlers: List[CloseHandler] = []

    def on_line(self, handler: LineHandler) -> None:
        self._line_handlers.append(handler)

    def on_close(self, handler: CloseHandler) -> None:
        self._close_handlers.append(handler)

    @property
    @abstractmethod
    def line(self) -> str:
        """Text currently sitting in the line buffer."""
        pass

    @abstractmethod
    async def read_line(self) -> Optional[str]:
        """Waits for the next submitted line, returns None once input is exhausted."""
        pass

    @abstractmethod
    def redraw(self, preserve_text: bool = True) -> None:
        """Erases the visible input line and renders the prompt again.

        Args:
            preserve_text: keep (and re-display) what the user has typed so far; otherwise the line buffer is cleared.
        """
        pass

    @abstractmethod
    def insert_text(self, text: str) -> None:
        """Puts text into the line buffer as though the user typed it."""
        pass

    async def start(self) -> None:
        """Reads lines until the input is exhausted, notifying line handlers once per line."""
        while True:
            line = await self.read_line()
            if line is None:
                break
            logger.debug("Line submitted: %r", line)
            for handler in list(self._line_handlers):
                handler(line)
        logger.debug("Input closed")
        for handler in list(self._close_handlers):
            handler()
