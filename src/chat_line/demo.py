import argparse
import asyncio
import logging
import os
from logging import getLogger
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from chat_line.api import ChatEvent, Message
from chat_line.channel import ChatChannel
from chat_line.config import ChatConfig, load_config
from chat_line.formatting import MessageFormatter
from chat_line.utils import setup_logging

logger = getLogger(__name__)

GREETING = Message(text="Welcome! Type a message and press Enter, Ctrl+D to leave.", sender="chat-line")


def build_channel(config: ChatConfig, echo_delay: Optional[float] = None) -> ChatChannel:
    """Creates a channel that prints every sent and received message, optionally echoing sent ones back."""
    channel = ChatChannel(config)
    formatter = MessageFormatter(config.display_settings)

    def show(message: Message) -> None:
        channel.print(formatter.format(message))

    channel.on(ChatEvent.MESSAGE_SENT, show)
    channel.on(ChatEvent.MESSAGE_RECEIVED, show)

    if echo_delay is not None:
        def echo(message: Message) -> None:
            reply = Message(text=message.text, sender="echo", extra={"in_reply_to": message.sender})
            asyncio.get_running_loop().call_later(echo_delay, channel.emit, ChatEvent.MESSAGE_RECEIVED, reply)

        channel.on(ChatEvent.MESSAGE_SENT, echo)
    return channel


async def chat(channel: ChatChannel, greeting: Optional[Message] = GREETING) -> None:
    if greeting is not None:
        # once the prompt is up, so the greeting is printed above it
        asyncio.get_running_loop().call_soon(channel.emit, ChatEvent.MESSAGE_RECEIVED, greeting)
    await channel.start()


def main():
    parser = argparse.ArgumentParser(
        description="Interactive chat prompt that prints incoming messages without breaking the input line."
    )
    parser.add_argument('--verbose', action='store_true', help="Enable verbose output.")
    parser.add_argument('--debug', action='store_true', help="Enable debug mode.")
    parser.add_argument('--config', type=str, help="Path to YAML file with chat settings.")
    parser.add_argument('--username', type=str, help="Sender label for typed messages (defaults to $CHAT_LINE_USERNAME).")
    parser.add_argument('--prompt', type=str, help="Prompt string.")
    parser.add_argument('--no-terminal', action='store_true', help="Read plain lines instead of using the line editor.")
    parser.add_argument('--echo', type=float, nargs='?', const=1.0, default=None, metavar='DELAY',
                        help="Echo every sent message back after DELAY seconds (default 1.0).")
    args = parser.parse_args()

    load_dotenv()
    if args.debug:
        setup_logging(console_level=logging.DEBUG)
    elif args.verbose:
        setup_logging(console_level=logging.INFO)
    else:
        setup_logging(console_level=logging.WARNING)

    overrides: Dict[str, Any] = {}
    username = args.username or os.environ.get("CHAT_LINE_USERNAME")
    if username:
        overrides['username'] = username
    if args.prompt is not None:
        overrides['prompt'] = args.prompt
    if args.no_terminal:
        overrides['terminal'] = False
    config = load_config(args.config, **overrides) if args.config else ChatConfig(**overrides)
    logger.debug("Starting chat with %r", config)

    channel = build_channel(config, echo_delay=args.echo)
    try:
        asyncio.run(chat(channel))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
