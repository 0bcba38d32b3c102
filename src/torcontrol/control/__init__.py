"""
Tor control protocol client.

This package implements the client side of Tor's control protocol: reply
framing, command encoding, reply parsing and the authenticated session.

See: https://spec.torproject.org/control-spec/
"""

from torcontrol.control.address import DEFAULT_ADDRESS, parse_control_address
from torcontrol.control.connection import ControlConnection
from torcontrol.control.controller import (
    AuthenticatedController,
    Controller,
    ControllerState,
    connect_with_cookie,
    connect_with_password,
)
from torcontrol.control.errors import (
    AuthMethodDisabled,
    ControllerError,
    CookieUnreadable,
    ErrorReply,
    GrammarMismatch,
    ReplyTimeout,
    ReplyTooLarge,
    TransportFailure,
    UnknownAuthMethod,
    UnknownKeyType,
)
from torcontrol.control.framing import LineFramer, is_final_line
from torcontrol.control.models import (
    AddOnionFlag,
    AddOnionReply,
    AuthMethod,
    ClientAuth,
    HiddenService,
    KeyType,
    ProtocolInfo,
    ServiceID,
    Signal,
)

__all__ = [
    # Session
    "Controller",
    "AuthenticatedController",
    "ControllerState",
    "ControlConnection",
    "connect_with_cookie",
    "connect_with_password",
    "DEFAULT_ADDRESS",
    "parse_control_address",
    # Framing
    "LineFramer",
    "is_final_line",
    # Models
    "AddOnionFlag",
    "AddOnionReply",
    "AuthMethod",
    "ClientAuth",
    "HiddenService",
    "KeyType",
    "ProtocolInfo",
    "ServiceID",
    "Signal",
    # Errors
    "ControllerError",
    "GrammarMismatch",
    "UnknownAuthMethod",
    "UnknownKeyType",
    "AuthMethodDisabled",
    "CookieUnreadable",
    "TransportFailure",
    "ReplyTimeout",
    "ReplyTooLarge",
    "ErrorReply",
]
