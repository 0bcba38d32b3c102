"""
Exceptions raised by the control protocol client.

Every failure aborts the operation in flight and propagates to the caller.
Nothing is retried and nothing is defaulted.
"""


class ControllerError(Exception):
    """Base exception for control protocol errors."""


class GrammarMismatch(ControllerError):
    """A reply did not match the grammar expected for the command issued."""

    def __init__(self, message: str, reply: str | None = None) -> None:
        super().__init__(message)
        self.reply = reply


class UnknownAuthMethod(GrammarMismatch, ValueError):
    """Authentication method token outside the known set."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown authentication method: {token!r}")
        self.token = token


class UnknownKeyType(GrammarMismatch, ValueError):
    """Key type token outside the known set."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown key type: {token!r}")
        self.token = token


class AuthMethodDisabled(ControllerError):
    """The requested authentication method was not advertised by Tor."""


class CookieUnreadable(ControllerError):
    """The authentication cookie file could not be read."""


class TransportFailure(ControllerError):
    """I/O failure on the control connection."""


class ReplyTimeout(TransportFailure):
    """No complete reply arrived before the deadline."""


class ReplyTooLarge(TransportFailure):
    """A reply grew past the configured size limit."""


class ErrorReply(GrammarMismatch):
    """Tor answered with an error status (4xx/5xx)."""

    def __init__(self, status: str, message: str, reply: str | None = None) -> None:
        super().__init__(f"{status} {message}", reply)
        self.status = status
        self.message = message
