import logging
import sys


def setup_logging(console_level: int = logging.WARNING, file_level: int = logging.DEBUG,
                  filename: str = "chat-line.log") -> None:
    """Sends everything down to file_level to the chat-line log file, and console_level and above to stderr."""
    logging.basicConfig(
        filename=filename,
        filemode="w",
        format="%(asctime)s: %(name)s - %(levelname)s - %(message)s",
        level=file_level
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(formatter)
    logging.getLogger().addHandler(console_handler)
