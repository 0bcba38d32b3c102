"""Control port address parsing."""

from torcontrol.control.connection import DEFAULT_HOST, DEFAULT_PORT

DEFAULT_ADDRESS = f"{DEFAULT_HOST}:{DEFAULT_PORT}"


def parse_control_address(address: str) -> tuple[str, int]:
    """
    Parse a control port address, handling IPv6 bracket notation.

    Examples:
        127.0.0.1:9051 -> ("127.0.0.1", 9051)
        [::1]:9051 -> ("::1", 9051)
        localhost:9151 -> ("localhost", 9151)

    Args:
        address: Address in format "host:port" or "[ipv6]:port"

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the format is invalid or port is out of range
    """
    address = address.strip()
    if address.startswith("["):
        bracket_end = address.find("]")
        if bracket_end == -1:
            raise ValueError(f"Invalid IPv6 address format (missing ]): {address}")
        if address[bracket_end + 1 : bracket_end + 2] != ":":
            raise ValueError(f"Invalid format (expected ]:port): {address}")
        host = address[1:bracket_end]
        port_str = address[bracket_end + 2 :]
    else:
        host, sep, port_str = address.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Invalid host:port format: {address}")
        if ":" in host:
            raise ValueError(f"IPv6 addresses must be bracketed: {address}")

    try:
        port = int(port_str)
    except ValueError as e:
        raise ValueError(f"Invalid port number: {port_str}") from e

    if port < 1 or port > 65535:
        raise ValueError(f"Port out of range (1-65535): {port}")

    return host, port
