"""
Control protocol session.

A session moves through three states:

    DISCONNECTED -> CONNECTED -> AUTHENTICATED

A Controller handles the unauthenticated part: PROTOCOLINFO negotiation and
authentication. Authenticating hands the connection over to an
AuthenticatedController, the only type with command methods, so commands
cannot be issued on a session that has not authenticated.
"""

import re
from collections.abc import Callable, Sequence
from enum import Enum, auto
from pathlib import Path
from types import TracebackType
from typing import TypeVar

from torcontrol import output
from torcontrol.control import commands, replies
from torcontrol.control.address import DEFAULT_ADDRESS, parse_control_address
from torcontrol.control.connection import DEFAULT_TIMEOUT, ControlConnection
from torcontrol.control.errors import AuthMethodDisabled, CookieUnreadable
from torcontrol.control.framing import DEFAULT_MAX_REPLY_SIZE
from torcontrol.control.models import (
    AddOnionFlag,
    AuthMethod,
    HiddenService,
    KeyType,
    ProtocolInfo,
    ServiceID,
    Signal,
)

T = TypeVar("T")

# Key material Tor returns from ADD_ONION
_SECRET_RE = re.compile(r"((?:PrivateKey|ClientAuth)=[^:\r\n]*:)[^\r\n]*")


def _redact(reply: str) -> str:
    """Hide private keys and client credentials in a reply."""
    return _SECRET_RE.sub(r"\1<redacted>", reply)


class ControllerState(Enum):
    """Session states."""

    DISCONNECTED = auto()  # No connection (never opened, closed, or failed)
    CONNECTED = auto()  # Connected, not authenticated
    AUTHENTICATED = auto()  # Commands may be issued


def _exchange(
    connection: ControlConnection,
    command: str,
    parser: Callable[[str], T],
    log_as: str | None = None,
) -> T:
    """
    Send one command, read its reply and parse it.

    Error replies (4xx/5xx) raise ErrorReply with Tor's message before the
    command's grammar is tried.
    """
    output.debug(f"-> {log_as or command}")
    connection.send_command(command)
    reply = connection.recv_reply()
    output.debug(f"<- {_redact(reply)}")
    replies.raise_for_status(reply)
    return parser(reply)


class Controller:
    """
    An unauthenticated control port session.

    Example:
        with Controller.connect("127.0.0.1:9051") as controller:
            session = controller.authenticate_cookie()
            print(session.get_info(["version"]))
    """

    def __init__(self, connection: ControlConnection) -> None:
        """
        Initialize with a connection (connected or not).

        Args:
            connection: Connection to the control port
        """
        self._connection = connection
        self._protocol_info: ProtocolInfo | None = None
        self._authenticated = False

    @classmethod
    def connect(
        cls,
        address: str = DEFAULT_ADDRESS,
        timeout: float | None = DEFAULT_TIMEOUT,
        max_reply_size: int = DEFAULT_MAX_REPLY_SIZE,
    ) -> "Controller":
        """
        Open a connection to the control port.

        Args:
            address: Control port as "host:port" or "[ipv6]:port"
            timeout: Seconds allowed for connecting and for each reply
            max_reply_size: Largest reply accepted, in bytes

        Raises:
            ValueError: If the address is malformed
            TransportFailure: If the connection cannot be established
        """
        host, port = parse_control_address(address)
        output.verbose(f"Connecting to control port {host}:{port}")
        connection = ControlConnection(host, port, timeout=timeout, max_reply_size=max_reply_size)
        connection.connect()
        return cls(connection)

    @property
    def state(self) -> ControllerState:
        """Current session state."""
        if not self._connection.is_connected:
            return ControllerState.DISCONNECTED
        if self._authenticated:
            return ControllerState.AUTHENTICATED
        return ControllerState.CONNECTED

    def _require_unauthenticated(self) -> None:
        if self._authenticated:
            raise RuntimeError("Controller is already authenticated")
        if not self._connection.is_connected:
            raise RuntimeError("Controller is not connected")

    def protocol_info(self) -> ProtocolInfo:
        """
        Negotiate with PROTOCOLINFO.

        Tor answers PROTOCOLINFO only once before authentication, so the
        result is cached for the lifetime of the connection.

        Raises:
            ErrorReply: If Tor rejects the command
            GrammarMismatch: If the reply is malformed
            TransportFailure: On I/O failure
        """
        if self._protocol_info is None:
            self._require_unauthenticated()
            output.explain("Asking Tor which authentication methods it accepts")
            self._protocol_info = _exchange(
                self._connection,
                commands.create_protocolinfo_command(),
                replies.parse_protocolinfo,
            )
            methods = ",".join(m.value for m in self._protocol_info.auth_methods)
            output.verbose(f"Tor {self._protocol_info.version}, auth methods: {methods}")
        return self._protocol_info

    def authenticate_password(self, password: str) -> "AuthenticatedController":
        """
        Authenticate with a password (HASHEDPASSWORD).

        Raises:
            AuthMethodDisabled: If Tor did not advertise HASHEDPASSWORD;
                nothing is sent in that case
            ErrorReply: If Tor rejects the password
        """
        self._require_unauthenticated()
        info = self.protocol_info()
        if not info.supports(AuthMethod.HASHEDPASSWORD):
            raise AuthMethodDisabled("Password authentication is not enabled")

        output.explain("Authenticating with password")
        _exchange(
            self._connection,
            commands.create_password_auth_command(password),
            replies.parse_authenticate,
            log_as="AUTHENTICATE <redacted>",
        )
        return self._authenticated_session()

    def authenticate_cookie(self) -> "AuthenticatedController":
        """
        Authenticate with the cookie file named in PROTOCOLINFO.

        Raises:
            AuthMethodDisabled: If Tor advertised neither COOKIE nor SAFECOOKIE
            CookieUnreadable: If the cookie file cannot be read
            ErrorReply: If Tor rejects the cookie
        """
        self._require_unauthenticated()
        info = self.protocol_info()
        if not (info.supports(AuthMethod.COOKIE) or info.supports(AuthMethod.SAFECOOKIE)):
            raise AuthMethodDisabled("Cookie authentication is not enabled")

        output.explain(f"Authenticating with cookie file {info.cookie_file}")
        try:
            cookie = Path(info.cookie_file).read_bytes()
        except OSError as e:
            raise CookieUnreadable(f"Cannot read cookie file {info.cookie_file}: {e}") from e

        _exchange(
            self._connection,
            commands.create_cookie_auth_command(cookie),
            replies.parse_authenticate,
            log_as="AUTHENTICATE <redacted>",
        )
        return self._authenticated_session()

    def _authenticated_session(self) -> "AuthenticatedController":
        self._authenticated = True
        output.verbose("Authenticated")
        assert self._protocol_info is not None
        return AuthenticatedController(self._connection, self._protocol_info)

    def close(self) -> None:
        """Close the connection."""
        self._connection.close()

    def __enter__(self) -> "Controller":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AuthenticatedController:
    """An authenticated control port session."""

    def __init__(self, connection: ControlConnection, protocol_info: ProtocolInfo) -> None:
        self._connection = connection
        self._protocol_info = protocol_info

    @property
    def protocol_info(self) -> ProtocolInfo:
        """PROTOCOLINFO result negotiated before authentication."""
        return self._protocol_info

    @property
    def is_connected(self) -> bool:
        """Check if the connection is still open."""
        return self._connection.is_connected

    def add_onion(
        self,
        port: int,
        key_type: KeyType = KeyType.BEST,
        target: str | None = None,
        flags: Sequence[AddOnionFlag] = (),
    ) -> HiddenService:
        """
        Create an ephemeral onion service with a new key.

        Args:
            port: Virtual port of the service
            key_type: Key type to generate (BEST lets Tor choose)
            target: Where Tor forwards connections ("host:port" or "port")
            flags: ADD_ONION flags

        Returns:
            The created service. private_key is None when DiscardPK was given.
        """
        output.explain(f"Creating ephemeral onion service on port {port}")
        reply = _exchange(
            self._connection,
            commands.create_add_onion_command(key_type, port, target, flags),
            replies.parse_add_onion,
        )
        if reply.key is None:
            return HiddenService(
                service_id=reply.service_id,
                key_type=key_type,
                client_auth=reply.client_auth,
            )
        returned_type, private_key = reply.key
        return HiddenService(
            service_id=reply.service_id,
            key_type=returned_type,
            private_key=private_key,
            client_auth=reply.client_auth,
        )

    def add_onion_with_key(
        self,
        key_type: KeyType,
        key: str,
        port: int,
        target: str | None = None,
        flags: Sequence[AddOnionFlag] = (),
    ) -> HiddenService:
        """
        Create an ephemeral onion service from an existing private key.

        When Tor does not echo the key back, the given key is reported.

        Raises:
            ValueError: If key_type is BEST
        """
        command = commands.create_add_onion_with_key_command(key_type, key, port, target, flags)
        output.explain(f"Creating onion service from existing {key_type} key on port {port}")
        reply = _exchange(
            self._connection,
            command,
            replies.parse_add_onion,
            log_as=commands.create_add_onion_with_key_command(
                key_type, "<redacted>", port, target, flags
            ),
        )
        returned_type, private_key = reply.key if reply.key is not None else (key_type, key)
        return HiddenService(
            service_id=reply.service_id,
            key_type=returned_type,
            private_key=private_key,
            client_auth=reply.client_auth,
        )

    def delete_onion(self, service_id: ServiceID | str) -> None:
        """
        Remove an onion service.

        Raises:
            ErrorReply: If Tor does not know the service
        """
        if isinstance(service_id, str):
            service_id = ServiceID(service_id)
        output.explain(f"Removing onion service {service_id}")
        _exchange(
            self._connection,
            commands.create_del_onion_command(service_id),
            replies.parse_ok,
        )

    def get_info(self, fields: Sequence[str] | str) -> dict[str, str]:
        """
        Query runtime information with GETINFO.

        Args:
            fields: Keys to query, e.g. ["version", "config-file"]

        Returns:
            Mapping of key to value
        """
        if isinstance(fields, str):
            fields = [fields]
        output.explain(f"Querying {', '.join(fields)}")
        return _exchange(
            self._connection,
            commands.create_getinfo_command(fields),
            replies.parse_getinfo,
        )

    def signal(self, signal: Signal | str) -> None:
        """
        Send a signal to Tor.

        Raises:
            ValueError: If a signal name is not known
        """
        if isinstance(signal, str):
            signal = Signal.from_name(signal)
        output.explain(f"Sending signal {signal}")
        _exchange(
            self._connection,
            commands.create_signal_command(signal),
            replies.parse_ok,
        )

    def close(self) -> None:
        """Close the connection (non-detached onion services go away with it)."""
        self._connection.close()

    def __enter__(self) -> "AuthenticatedController":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def connect_with_password(
    password: str,
    address: str = DEFAULT_ADDRESS,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> AuthenticatedController:
    """
    Connect and authenticate with a password.

    The connection is closed if authentication fails.
    """
    controller = Controller.connect(address, timeout=timeout)
    try:
        return controller.authenticate_password(password)
    except BaseException:
        controller.close()
        raise


def connect_with_cookie(
    address: str = DEFAULT_ADDRESS,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> AuthenticatedController:
    """
    Connect and authenticate with the cookie file.

    The connection is closed if authentication fails.
    """
    controller = Controller.connect(address, timeout=timeout)
    try:
        return controller.authenticate_cookie()
    except BaseException:
        controller.close()
        raise
