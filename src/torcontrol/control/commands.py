"""
Control protocol command encoding.

Each function returns the command text without the trailing CRLF, which
the connection appends when sending.
"""

from collections.abc import Iterable, Sequence

from torcontrol.control.models import AddOnionFlag, KeyType, ServiceID, Signal


def _check_argument(name: str, value: str) -> str:
    """Reject values that would end the command line early."""
    if "\r" in value or "\n" in value:
        raise ValueError(f"{name} must not contain line breaks: {value!r}")
    return value


def _check_token(name: str, value: str) -> str:
    """Reject empty values and values containing whitespace."""
    if not value or any(c.isspace() for c in value):
        raise ValueError(f"Invalid {name}: {value!r}")
    return value


def create_protocolinfo_command() -> str:
    """Create a PROTOCOLINFO command."""
    return "PROTOCOLINFO"


def create_password_auth_command(password: str) -> str:
    """
    Create an AUTHENTICATE command for HASHEDPASSWORD authentication.

    Double quotes in the password are escaped; nothing else is.

    Raises:
        ValueError: If the password contains a line break
    """
    escaped = _check_argument("password", password).replace('"', '\\"')
    return f'AUTHENTICATE "{escaped}"'


def create_cookie_auth_command(cookie: bytes) -> str:
    """Create an AUTHENTICATE command carrying the cookie as uppercase hex."""
    return f"AUTHENTICATE {cookie.hex().upper()}"


def _port_spec(port: int, target: str | None) -> str:
    if target:
        return f"port={port},{_check_token('target', target)}"
    return f"port={port}"


def _flags_spec(flags: Iterable[AddOnionFlag]) -> str:
    names = [str(flag) for flag in flags]
    if not names:
        return ""
    return " Flags=" + ",".join(names)


def create_add_onion_command(
    key_type: KeyType,
    port: int,
    target: str | None = None,
    flags: Sequence[AddOnionFlag] = (),
) -> str:
    """
    Create an ADD_ONION command asking Tor to generate a new key.

    Args:
        key_type: Type of key to generate (BEST lets Tor choose)
        port: Virtual port of the onion service
        target: Optional target ("host:port" or "port"), Tor defaults to the same local port
        flags: Optional ADD_ONION flags

    Returns:
        e.g. "ADD_ONION NEW:ED25519-V3 port=80"

    Raises:
        ValueError: If target contains whitespace
    """
    return f"ADD_ONION NEW:{key_type} {_port_spec(port, target)}{_flags_spec(flags)}"


def create_add_onion_with_key_command(
    key_type: KeyType,
    key: str,
    port: int,
    target: str | None = None,
    flags: Sequence[AddOnionFlag] = (),
) -> str:
    """
    Create an ADD_ONION command for an existing private key.

    Raises:
        ValueError: If key_type is BEST, which only makes sense for new keys,
            or if key or target is empty or contains whitespace
    """
    if key_type == KeyType.BEST:
        raise ValueError("BEST key type can only be used for new keys")
    _check_token("key", key)
    return f"ADD_ONION {key_type}:{key} {_port_spec(port, target)}{_flags_spec(flags)}"


def create_del_onion_command(service_id: ServiceID) -> str:
    """
    Create a DEL_ONION command.

    Raises:
        ValueError: If the service id is empty or contains whitespace
    """
    return f"DEL_ONION {_check_token('service id', service_id.value)}"


def create_getinfo_command(fields: Sequence[str]) -> str:
    """
    Create a GETINFO command.

    Field names are passed through as given.

    Raises:
        ValueError: If no fields are given, or a field is empty or contains
            whitespace
    """
    if not fields:
        raise ValueError("GETINFO requires at least one field")
    return "GETINFO " + " ".join(_check_token("GETINFO field", field) for field in fields)


def create_signal_command(signal: Signal) -> str:
    """Create a SIGNAL command."""
    return f"SIGNAL {signal}"
