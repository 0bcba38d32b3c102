"""
Environment configuration for the CLI and HTTP API.

    TORCONTROL_ADDRESS   control port, "host:port" (default 127.0.0.1:9051)
    TORCONTROL_TIMEOUT   seconds allowed per reply (default 30)
    TORCONTROL_PASSWORD  password for HASHEDPASSWORD authentication

The client library itself never reads the environment.
"""

import os
import sys

from torcontrol.control.address import DEFAULT_ADDRESS
from torcontrol.control.connection import DEFAULT_TIMEOUT


def get_address() -> str:
    """Get control port address from TORCONTROL_ADDRESS or use default."""
    return os.environ.get("TORCONTROL_ADDRESS") or DEFAULT_ADDRESS


def get_timeout() -> float:
    """Get timeout from TORCONTROL_TIMEOUT env var or use default."""
    env_timeout = os.environ.get("TORCONTROL_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            print(f"Warning: Invalid TORCONTROL_TIMEOUT value: {env_timeout}", file=sys.stderr)
    return DEFAULT_TIMEOUT


def get_password() -> str | None:
    """Get password from TORCONTROL_PASSWORD, None if unset."""
    return os.environ.get("TORCONTROL_PASSWORD") or None
