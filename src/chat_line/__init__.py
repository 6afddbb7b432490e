"""Terminal chat line - read user input and print asynchronous messages without garbling the prompt."""

import importlib.metadata

from chat_line.api import ChatEvent, LineSource, Message
from chat_line.channel import ChatChannel
from chat_line.config import ChatConfig, DisplaySettings, load_config
from chat_line.events import EventEmitter
from chat_line.formatting import MessageFormatter
from chat_line.line_source import PromptLineSource, StreamLineSource, create_line_source

__all__ = [
    "ChatChannel",
    "ChatConfig",
    "ChatEvent",
    "DisplaySettings",
    "EventEmitter",
    "LineSource",
    "Message",
    "MessageFormatter",
    "PromptLineSource",
    "StreamLineSource",
    "create_line_source",
    "load_config",
]

try:
    # Fetch version from the installed package metadata
    __version__ = importlib.metadata.version("chat-line")
except importlib.metadata.PackageNotFoundError:
    # Handle cases where package is not installed (e.g. local dev)
    __version__ = "unknown"
