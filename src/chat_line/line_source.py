import asyncio
import threading
from logging import getLogger
from typing import Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.input import DummyInput, Input, create_input
from prompt_toolkit.output import DummyOutput, Output, create_output

from chat_line.api import LineSource
from chat_line.config import ChatConfig
from chat_line.terminal import clear_line, flush, is_writable

logger = getLogger(__name__)


class PromptLineSource(LineSource):
    """Line source backed by a prompt_toolkit session, used in terminal mode.

    The session is driven with `prompt_async`, so other coroutines on the same loop can print
    while the prompt is waiting for input.
    """

    def __init__(self, config: ChatConfig, session_input: Optional[Input] = None,
                 session_output: Optional[Output] = None):
        super().__init__()
        self._output = config.output
        self._pending_text = ""
        if session_input is None:
            session_input = create_input(stdin=config.input) if config.input is not None else DummyInput()
        if session_output is None:
            session_output = create_output(stdout=config.output) if is_writable(config.output) else DummyOutput()
        self._session = PromptSession(
            message=config.prompt,
            history=InMemoryHistory(),
            input=session_input,
            output=session_output,
        )

    @property
    def session(self) -> PromptSession:
        return self._session

    @property
    def line(self) -> str:
        if self._session.app.is_running:
            return self._session.default_buffer.text
        return self._pending_text

    async def read_line(self) -> Optional[str]:
        default, self._pending_text = self._pending_text, ""
        try:
            return await self._session.prompt_async(default=default)
        except (EOFError, KeyboardInterrupt):
            return None

    def insert_text(self, text: str) -> None:
        # prompt_async resets the buffer when it starts, so hold the text until then
        if self._session.app.is_running:
            self._session.default_buffer.insert_text(text)
        else:
            self._pending_text += text

    def redraw(self, preserve_text: bool = True) -> None:
        app = self._session.app
        if not preserve_text:
            self._pending_text = ""
            if app.is_running:
                app.current_buffer.reset()
        if not is_writable(self._output) or not app.is_running:
            return
        # whatever was printed moved the cursor, render the prompt from scratch at its new position
        app.renderer.reset()
        app.invalidate()


class StreamLineSource(LineSource):
    """Line source reading newline-terminated lines from a plain text stream.

    Nothing is echoed, so the line buffer only ever holds text added with `insert_text`.
    """

    def __init__(self, config: ChatConfig):
        super().__init__()
        self._input = config.input
        self._output = config.output
        self._prompt = config.prompt
        self._line_buffer = ""

    @property
    def line(self) -> str:
        return self._line_buffer

    async def start(self) -> None:
        if is_writable(self._output):
            self._output.write(self._prompt)
            flush(self._output)
        await super().start()

    async def read_line(self) -> Optional[str]:
        if self._input is None or getattr(self._input, 'closed', False):
            return None
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        # daemon thread, so a read still blocked at shutdown never holds up the loop or the process
        threading.Thread(target=_read_in_background, args=(loop, future, self._input.readline),
                         name="chat-line-reader", daemon=True).start()
        raw = await future
        if not raw:
            return None
        if raw.endswith("\n"):
            raw = raw[:-1]
            if raw.endswith("\r"):
                raw = raw[:-1]
        text, self._line_buffer = self._line_buffer + raw, ""
        return text

    def insert_text(self, text: str) -> None:
        self._line_buffer += text
        if is_writable(self._output):
            self._output.write(text)
            flush(self._output)

    def redraw(self, preserve_text: bool = True) -> None:
        if not preserve_text:
            self._line_buffer = ""
        if not is_writable(self._output):
            return
        clear_line(self._output, start_of_line=True)
        self._output.write(self._prompt + self._line_buffer)
        flush(self._output)


def _settle(future: asyncio.Future, result: Optional[str], error: Optional[BaseException]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


def _read_in_background(loop: asyncio.AbstractEventLoop, future: asyncio.Future,
                        readline: Callable[[], str]) -> None:
    try:
        result, error = readline(), None
    except Exception as e:
        result, error = None, e
    try:
        loop.call_soon_threadsafe(_settle, future, result, error)
    except RuntimeError:
        logger.debug("Event loop closed before a pending line was read, dropping it")


def create_line_source(config: ChatConfig) -> LineSource:
    if config.terminal:
        logger.debug("Using prompt_toolkit line source")
        return PromptLineSource(config)
    logger.debug("Using plain stream line source")
    return StreamLineSource(config)
