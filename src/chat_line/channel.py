import asyncio
from logging import getLogger
from typing import Any, Callable, Optional, Union

from chat_line import terminal
from chat_line.api import ChatEvent, LineSource, Message
from chat_line.config import ChatConfig
from chat_line.events import EventEmitter
from chat_line.line_source import create_line_source

logger = getLogger(__name__)

EventKind = Union[ChatEvent, str]


class ChatChannel:
    """Local send/receive bus bound to one interactive prompt.

    Lines submitted at the prompt are published as `message-sent`, tagged with the configured username.
    `print` writes text to the terminal without corrupting whatever the user is typing.
    """

    def __init__(self, config: Optional[ChatConfig] = None, line_source: Optional[LineSource] = None):
        self._config = config if config is not None else ChatConfig()
        self._output = self._config.output
        self.events = EventEmitter()
        self.line_source = line_source if line_source is not None else create_line_source(self._config)
        self.line_source.on_line(self._on_line_submitted)
        self.line_source.on_close(self._on_input_closed)

    @property
    def config(self) -> ChatConfig:
        return self._config

    def on(self, event: EventKind, handler: Callable[[Any], None]) -> "ChatChannel":
        self.events.on(ChatEvent(event), handler)
        return self

    def once(self, event: EventKind, handler: Callable[[Any], None]) -> "ChatChannel":
        self.events.once(ChatEvent(event), handler)
        return self

    def off(self, event: EventKind, handler: Callable[[Any], None]) -> "ChatChannel":
        self.events.off(ChatEvent(event), handler)
        return self

    def listener_count(self, event: EventKind) -> int:
        return self.events.listener_count(ChatEvent(event))

    def emit(self, event: EventKind, message: Optional[Message] = None) -> bool:
        """Dispatches message to every handler of event, returns whether anyone was listening."""
        return self.events.emit(ChatEvent(event), message)

    def send_message(self, message: Message) -> bool:
        """Publishes message as though it was typed at the prompt.

        Unlike typed lines, the configured username is NOT attached.
        """
        return self.emit(ChatEvent.MESSAGE_SENT, message)

    def print(self, text: str, reset_cursor: bool = True, preserve_line: bool = True, clear_line: bool = True) -> None:
        """Writes text to the terminal around the live prompt.

        Args:
            text: written verbatim
            reset_cursor: move past the printed text and redraw the prompt
            preserve_line: keep what the user has typed when redrawing
            clear_line: erase the stale prompt line first, so text starts at column zero
        """
        output = self._output
        if not terminal.is_writable(output):
            return
        if reset_cursor and clear_line:
            terminal.clear_line(output, start_of_line=True)
        output.write(text)
        if reset_cursor:
            output.write(terminal.NEWLINE)
            terminal.flush(output)
            self.line_source.redraw(preserve_line)
        else:
            terminal.flush(output)

    async def start(self) -> None:
        """Reads the prompt until its input is exhausted."""
        await self.line_source.start()

    def run(self) -> None:
        asyncio.run(self.start())

    def _on_line_submitted(self, text: str) -> None:
        self.emit(ChatEvent.MESSAGE_SENT, Message(text=text, sender=self._config.username))

    def _on_input_closed(self) -> None:
        logger.debug("Prompt input closed")
        self.emit(ChatEvent.CLOSED)
