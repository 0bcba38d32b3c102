"""Tests for control port address parsing."""

import pytest

from torcontrol.control.address import DEFAULT_ADDRESS, parse_control_address


def test_default_address() -> None:
    """Test the default control port."""
    assert parse_control_address(DEFAULT_ADDRESS) == ("127.0.0.1", 9051)


@pytest.mark.parametrize(
    "address,expected",
    [
        ("127.0.0.1:9051", ("127.0.0.1", 9051)),
        ("localhost:9151", ("localhost", 9151)),
        ("[::1]:9051", ("::1", 9051)),
        (" 10.0.0.2:9051 ", ("10.0.0.2", 9051)),
    ],
)
def test_valid_addresses(address: str, expected: tuple[str, int]) -> None:
    """Test host:port and [ipv6]:port forms."""
    assert parse_control_address(address) == expected


@pytest.mark.parametrize(
    "address",
    ["127.0.0.1", ":9051", "[::1", "[::1]9051", "::1:9051", "host:port", "host:0", "host:65536"],
)
def test_invalid_addresses(address: str) -> None:
    """Test malformed addresses and out-of-range ports."""
    with pytest.raises(ValueError):
        parse_control_address(address)
