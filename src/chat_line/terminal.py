from typing import Any, TextIO

CLEAR_LINE = "\x1b[2K"
LINE_START = "\r"
NEWLINE = "\n"


def is_writable(stream: Any) -> bool:
    """Returns False for a missing or closed output stream."""
    if stream is None:
        return False
    return not getattr(stream, 'closed', False)


def clear_line(output: TextIO, start_of_line: bool = False) -> None:
    """Clears the current line in the output stream.

    Args:
        output: stream to clear the line in
        start_of_line: also move the cursor to column zero after clearing
    """
    output.write(CLEAR_LINE)
    if start_of_line:
        output.write(LINE_START)


def flush(stream: Any) -> None:
    flush_method = getattr(stream, 'flush', None)
    if flush_method is not None:
        flush_method()
