"""Tests for command encoding."""

import pytest

from torcontrol.control.commands import (
    create_add_onion_command,
    create_add_onion_with_key_command,
    create_cookie_auth_command,
    create_del_onion_command,
    create_getinfo_command,
    create_password_auth_command,
    create_protocolinfo_command,
    create_signal_command,
)
from torcontrol.control.models import AddOnionFlag, KeyType, ServiceID, Signal


def test_protocolinfo() -> None:
    """Test PROTOCOLINFO is a bare keyword."""
    assert create_protocolinfo_command() == "PROTOCOLINFO"


class TestAuthenticate:
    """Tests for AUTHENTICATE encoding."""

    def test_password_is_quoted(self) -> None:
        """Test a plain password is wrapped in double quotes."""
        assert create_password_auth_command("secret") == 'AUTHENTICATE "secret"'

    def test_password_quotes_are_escaped(self) -> None:
        """Test that only double quotes are escaped."""
        command = create_password_auth_command('pa"ss\\word \'x\'')
        assert command == 'AUTHENTICATE "pa\\"ss\\word \'x\'"'

    @pytest.mark.parametrize("password", ["a\r\nSIGNAL HALT", "a\nb", "a\rb"])
    def test_password_line_breaks_rejected(self, password: str) -> None:
        """Test a password cannot end the command line early."""
        with pytest.raises(ValueError):
            create_password_auth_command(password)

    def test_password_spaces_allowed(self) -> None:
        """Test spaces stay inside the quoted password."""
        assert create_password_auth_command("two words") == 'AUTHENTICATE "two words"'

    def test_cookie_is_uppercase_hex(self) -> None:
        """Test cookie bytes are sent as unseparated uppercase hex."""
        cookie = bytes([0x00, 0x0A, 0xAB, 0xFF])
        assert create_cookie_auth_command(cookie) == "AUTHENTICATE 000AABFF"

    def test_cookie_full_length(self) -> None:
        """Test a 32-byte cookie gives 64 hex characters."""
        command = create_cookie_auth_command(bytes(range(32)))
        assert len(command.split(" ")[1]) == 64


class TestAddOnion:
    """Tests for ADD_ONION encoding."""

    @pytest.mark.parametrize(
        "key_type,expected",
        [
            (KeyType.BEST, "ADD_ONION NEW:BEST port=80"),
            (KeyType.RSA1024, "ADD_ONION NEW:RSA1024 port=80"),
            (KeyType.ED25519_V3, "ADD_ONION NEW:ED25519-V3 port=80"),
        ],
    )
    def test_new_key(self, key_type: KeyType, expected: str) -> None:
        """Test ADD_ONION with a generated key."""
        assert create_add_onion_command(key_type, 80) == expected

    def test_existing_key(self) -> None:
        """Test ADD_ONION with a caller-supplied key."""
        command = create_add_onion_with_key_command(KeyType.ED25519_V3, "abc+/=", 8080)
        assert command == "ADD_ONION ED25519-V3:abc+/= port=8080"

    def test_target_and_flags(self) -> None:
        """Test target and flags are appended after the port."""
        command = create_add_onion_command(
            KeyType.ED25519_V3,
            80,
            target="127.0.0.1:8080",
            flags=[AddOnionFlag.DISCARD_PK, AddOnionFlag.DETACH],
        )
        assert command == "ADD_ONION NEW:ED25519-V3 port=80,127.0.0.1:8080 Flags=DiscardPK,Detach"

    def test_existing_key_rejects_best(self) -> None:
        """Test BEST cannot be used with an existing key."""
        with pytest.raises(ValueError):
            create_add_onion_with_key_command(KeyType.BEST, "abc", 80)

    @pytest.mark.parametrize("key", ["", "abc\r\nSIGNAL HALT", "abc Flags=Detach"])
    def test_bad_key_rejected(self, key: str) -> None:
        """Test a key must be one non-empty token."""
        with pytest.raises(ValueError):
            create_add_onion_with_key_command(KeyType.ED25519_V3, key, 80)

    @pytest.mark.parametrize("target", ["8080\r\nSIGNAL HALT", "127.0.0.1:8080 Flags=Detach"])
    def test_bad_target_rejected(self, target: str) -> None:
        """Test a target must be one token."""
        with pytest.raises(ValueError):
            create_add_onion_command(KeyType.ED25519_V3, 80, target=target)


def test_del_onion() -> None:
    """Test DEL_ONION carries the service id verbatim."""
    assert create_del_onion_command(ServiceID("rdwu5tfgmibbgvff")) == "DEL_ONION rdwu5tfgmibbgvff"


@pytest.mark.parametrize("service_id", ["", "abc\r\nSIGNAL HALT", "abc def"])
def test_del_onion_bad_service_id(service_id: str) -> None:
    """Test a service id must be one non-empty token."""
    with pytest.raises(ValueError):
        create_del_onion_command(ServiceID(service_id))


class TestGetInfo:
    """Tests for GETINFO encoding."""

    def test_single_field(self) -> None:
        """Test a single field."""
        assert create_getinfo_command(["version"]) == "GETINFO version"

    def test_fields_are_space_joined(self) -> None:
        """Test fields are joined with spaces and passed through unchanged."""
        command = create_getinfo_command(["version", "net/listeners/socks", "md/id/ABC"])
        assert command == "GETINFO version net/listeners/socks md/id/ABC"

    def test_no_fields(self) -> None:
        """Test that an empty field list is rejected."""
        with pytest.raises(ValueError):
            create_getinfo_command([])

    @pytest.mark.parametrize(
        "fields",
        [
            ["version\r\nSIGNAL HALT"],
            ["version\n"],
            ["version", "config file"],
            ["version", ""],
        ],
    )
    def test_bad_fields_rejected(self, fields: list[str]) -> None:
        """Test each field must be one non-empty token."""
        with pytest.raises(ValueError):
            create_getinfo_command(fields)


@pytest.mark.parametrize("signal", list(Signal))
def test_signal(signal: Signal) -> None:
    """Test every signal encodes as SIGNAL <NAME>."""
    assert create_signal_command(signal) == f"SIGNAL {signal.value}"


def test_signal_names() -> None:
    """Test the set of signal names."""
    assert [s.value for s in Signal] == [
        "RELOAD",
        "SHUTDOWN",
        "DUMP",
        "DEBUG",
        "HALT",
        "CLEARDNSCACHE",
        "NEWNYM",
        "HEARTBEAT",
        "DORMANT",
        "ACTIVE",
    ]
