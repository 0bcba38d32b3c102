"""
Control port connection.

Sends command lines and reads complete replies over a TCP connection to
Tor's control port. One command is in flight at a time; the connection is
not shared between threads.
"""

import socket
import time
from types import TracebackType
from typing import BinaryIO

from torcontrol.control.errors import ReplyTimeout, ReplyTooLarge, TransportFailure
from torcontrol.control.framing import DEFAULT_MAX_REPLY_SIZE, LineFramer

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9051

# Seconds allowed for a complete reply (None waits forever)
DEFAULT_TIMEOUT = 30.0


class ControlConnection:
    """
    A connection to Tor's control port.

    Any I/O failure closes the connection; a new one must be opened to
    continue.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float | None = DEFAULT_TIMEOUT,
        max_reply_size: int = DEFAULT_MAX_REPLY_SIZE,
    ) -> None:
        """
        Initialize the connection (does not connect yet).

        Args:
            host: Control port address
            port: Control port number
            timeout: Seconds allowed for connecting and for each reply
            max_reply_size: Largest reply accepted, in bytes
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.max_reply_size = max_reply_size
        self._sock: socket.socket | None = None
        self._reader: BinaryIO | None = None

    @classmethod
    def from_socket(
        cls,
        sock: socket.socket,
        timeout: float | None = DEFAULT_TIMEOUT,
        max_reply_size: int = DEFAULT_MAX_REPLY_SIZE,
    ) -> "ControlConnection":
        """Wrap an already connected socket."""
        conn = cls(timeout=timeout, max_reply_size=max_reply_size)
        conn._attach(sock)
        return conn

    @property
    def is_connected(self) -> bool:
        """Check if the connection is open."""
        return self._sock is not None

    def _attach(self, sock: socket.socket) -> None:
        self._sock = sock
        self._reader = sock.makefile("rb")

    def connect(self) -> None:
        """
        Open the TCP connection.

        Raises:
            TransportFailure: If the connection cannot be established
        """
        if self._sock is not None:
            return
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise TransportFailure(
                f"Failed to connect to control port at {self.host}:{self.port}: {e}"
            ) from e
        self._attach(sock)

    def close(self) -> None:
        """Close the connection."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "ControlConnection":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def send_command(self, command: str) -> None:
        """
        Send one command line (CRLF is appended).

        Raises:
            RuntimeError: If the connection is closed
            TransportFailure: If the write fails
        """
        if self._sock is None:
            raise RuntimeError("Connection is closed")
        try:
            self._sock.settimeout(self.timeout)
            self._sock.sendall(f"{command}\r\n".encode())
        except OSError as e:
            self.close()
            raise TransportFailure(f"Failed to send command: {e}") from e

    def recv_reply(self) -> str:
        """
        Read lines until a complete reply has arrived.

        Returns:
            The reply text with its original line endings

        Raises:
            RuntimeError: If the connection is closed
            ReplyTimeout: If the reply did not complete in time
            ReplyTooLarge: If the reply exceeded max_reply_size
            TransportFailure: On EOF before the final line or any other I/O error
        """
        if self._sock is None or self._reader is None:
            raise RuntimeError("Connection is closed")

        framer = LineFramer(self.max_reply_size)
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        try:
            while not framer.complete:
                framer.feed(self._read_line(deadline, self.max_reply_size - framer.size + 1))
        except TransportFailure:
            self.close()
            raise
        return framer.reply

    def _read_line(self, deadline: float | None, limit: int) -> str:
        """Read one CRLF-terminated line within the deadline."""
        assert self._sock is not None and self._reader is not None

        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ReplyTimeout(f"No complete reply within {self.timeout} seconds")
            self._sock.settimeout(remaining)
        else:
            self._sock.settimeout(None)

        try:
            data = self._reader.readline(limit)
        except TimeoutError as e:
            raise ReplyTimeout(f"No complete reply within {self.timeout} seconds") from e
        except OSError as e:
            raise TransportFailure(f"Failed to read reply: {e}") from e

        if not data.endswith(b"\n"):
            if len(data) >= limit:
                raise ReplyTooLarge(f"Reply exceeds {self.max_reply_size} bytes")
            raise TransportFailure("Connection closed by Tor before the reply was complete")

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransportFailure(f"Reply is not valid UTF-8: {e}") from e
