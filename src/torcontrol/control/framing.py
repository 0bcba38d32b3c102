"""
Reply framing for the control protocol.

A reply is one or more lines, each starting with a three-digit status code
followed by a separator:

    250-...   continuation, more lines follow
    250+...   data reply, followed by raw lines up to a lone "."
    250 ...   final line, the reply is complete
"""

from torcontrol.control.errors import ReplyTooLarge

# Upper bound on a buffered reply. GETINFO ns/all is a few MB on the live network.
DEFAULT_MAX_REPLY_SIZE = 16 * 1024 * 1024

_DIGITS = "0123456789"


def is_final_line(line: str) -> bool:
    """
    Check if a line terminates a reply.

    A final line has a three-digit status code followed by a space. Lines
    shorter than five characters are never final.
    """
    if len(line) < 5:
        return False
    if not all(c in _DIGITS for c in line[:3]):
        return False
    return line[3] == " "


def _is_data_line(line: str) -> bool:
    """Check if a line opens a data block ("250+key=")."""
    return len(line) >= 4 and all(c in _DIGITS for c in line[:3]) and line[3] == "+"


class LineFramer:
    """
    Accumulates reply lines until a final line is seen.

    Lines are kept with their original line endings, so the assembled reply
    is exactly the text received.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_REPLY_SIZE) -> None:
        self.max_size = max_size
        self._lines: list[str] = []
        self._size = 0
        self._in_data = False
        self._complete = False

    @property
    def complete(self) -> bool:
        """True once a final line has been fed."""
        return self._complete

    @property
    def size(self) -> int:
        """Number of bytes (UTF-8) buffered so far."""
        return self._size

    def feed(self, line: str) -> bool:
        """
        Add one line to the buffer.

        Args:
            line: A single line including its line ending

        Returns:
            True if the reply is now complete

        Raises:
            ReplyTooLarge: If the buffer grows past max_size
            RuntimeError: If the reply was already complete
        """
        if self._complete:
            raise RuntimeError("Reply already complete")

        self._size += len(line.encode("utf-8"))
        if self._size > self.max_size:
            raise ReplyTooLarge(f"Reply exceeds {self.max_size} bytes")
        self._lines.append(line)

        if self._in_data:
            # Data lines are opaque until the terminating "."
            if line.rstrip("\r\n") == ".":
                self._in_data = False
            return False

        if _is_data_line(line):
            self._in_data = True
            return False

        self._complete = is_final_line(line)
        return self._complete

    @property
    def reply(self) -> str:
        """
        Get the assembled reply.

        Raises:
            RuntimeError: If no final line has been seen yet
        """
        if not self._complete:
            raise RuntimeError("Reply is incomplete")
        return "".join(self._lines)

    def reset(self) -> None:
        """Discard the buffer to frame the next reply."""
        self._lines = []
        self._size = 0
        self._in_data = False
        self._complete = False

