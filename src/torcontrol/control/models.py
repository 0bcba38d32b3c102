"""
Value types shared by the command encoder, reply grammar and controller.

Wire tokens are converted with explicit lookups; a token outside the known
set is an error, never coerced into a default.

See: https://spec.torproject.org/control-spec/
"""

from dataclasses import dataclass, field
from enum import Enum

from torcontrol.control.errors import UnknownAuthMethod, UnknownKeyType


class AuthMethod(Enum):
    """Authentication methods advertised in a PROTOCOLINFO reply."""

    COOKIE = "COOKIE"
    SAFECOOKIE = "SAFECOOKIE"
    HASHEDPASSWORD = "HASHEDPASSWORD"

    @classmethod
    def from_token(cls, token: str) -> "AuthMethod":
        """
        Parse an uppercase wire token.

        Raises:
            UnknownAuthMethod: If the token is not a known method
        """
        try:
            return cls(token)
        except ValueError:
            raise UnknownAuthMethod(token) from None


class KeyType(Enum):
    """Onion service key types."""

    BEST = "BEST"  # Request-only: let Tor pick
    RSA1024 = "RSA1024"
    ED25519_V3 = "ED25519-V3"

    @classmethod
    def from_token(cls, token: str) -> "KeyType":
        """
        Parse a key type returned by Tor.

        BEST is never returned by Tor, so it is not accepted here.

        Raises:
            UnknownKeyType: If the token is not RSA1024 or ED25519-V3
        """
        if token == cls.RSA1024.value:
            return cls.RSA1024
        if token == cls.ED25519_V3.value:
            return cls.ED25519_V3
        raise UnknownKeyType(token)

    def __str__(self) -> str:
        return self.value


class Signal(Enum):
    """Signals accepted by the SIGNAL command."""

    RELOAD = "RELOAD"
    SHUTDOWN = "SHUTDOWN"
    DUMP = "DUMP"
    DEBUG = "DEBUG"
    HALT = "HALT"
    CLEARDNSCACHE = "CLEARDNSCACHE"
    NEWNYM = "NEWNYM"
    HEARTBEAT = "HEARTBEAT"
    DORMANT = "DORMANT"
    ACTIVE = "ACTIVE"

    @classmethod
    def from_name(cls, name: str) -> "Signal":
        """
        Parse a signal name from user input (case-insensitive).

        Raises:
            ValueError: If the name is not a known signal
        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown signal: {name}") from None

    def __str__(self) -> str:
        return self.value


class AddOnionFlag(Enum):
    """Optional flags for ADD_ONION."""

    DISCARD_PK = "DiscardPK"  # Do not return the private key
    DETACH = "Detach"  # Keep the service after the control connection closes
    BASIC_AUTH = "BasicAuth"  # Client authorization (v2 services)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ServiceID:
    """Onion service identifier (the address without ".onion")."""

    value: str

    @property
    def onion_address(self) -> str:
        """Get the full .onion address."""
        return f"{self.value}.onion"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClientAuth:
    """Client credentials returned by ADD_ONION with BasicAuth."""

    name: str
    blob: str


@dataclass(frozen=True)
class ProtocolInfo:
    """Result of PROTOCOLINFO negotiation."""

    auth_methods: tuple[AuthMethod, ...]  # In the order Tor sent them
    version: str
    cookie_file: str

    def supports(self, method: AuthMethod) -> bool:
        """Check if an authentication method was advertised."""
        return method in self.auth_methods


@dataclass(frozen=True)
class AddOnionReply:
    """Parsed ADD_ONION reply."""

    service_id: ServiceID
    key: tuple[KeyType, str] | None = None  # Absent when the key was discarded
    client_auth: tuple[ClientAuth, ...] = ()


@dataclass(frozen=True)
class HiddenService:
    """An ephemeral onion service created by ADD_ONION."""

    service_id: ServiceID
    key_type: KeyType
    private_key: str | None = None
    client_auth: tuple[ClientAuth, ...] = field(default=())

    @property
    def onion_address(self) -> str:
        """Get the full .onion address."""
        return self.service_id.onion_address
