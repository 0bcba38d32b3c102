"""
Reply grammars for the control protocol.

Each parser takes one complete reply, as assembled by the line framer, and
returns a typed result or raises GrammarMismatch. Parsers are pure: the same
input always gives the same result.

Both "\\n" and "\\r\\n" line endings are accepted. The reply must end with its
final line; anything after it is a mismatch.

Example replies:

    PROTOCOLINFO
    250-PROTOCOLINFO 1
    250-AUTH METHODS=COOKIE,SAFECOOKIE COOKIEFILE="/var/run/tor/control.authcookie"
    250-VERSION Tor="0.4.8.10"
    250 OK

    GETINFO version
    250-version=0.4.8.10
    250 OK

    ADD_ONION NEW:ED25519-V3 port=80
    250-ServiceID=<56 chars>
    250-PrivateKey=ED25519-V3:<base64>
    250 OK
"""

import re

from torcontrol.control.errors import (
    ErrorReply,
    GrammarMismatch,
    UnknownAuthMethod,
    UnknownKeyType,
)
from torcontrol.control.models import (
    AddOnionReply,
    AuthMethod,
    ClientAuth,
    KeyType,
    ProtocolInfo,
    ServiceID,
)

OK_LINE = "250 OK"

_LINE_ENDING_RE = re.compile(r"\r?\n")
_STATUS_LINE_RE = re.compile(r"([0-9]{3})([ +-])(.*)")

_AUTH_RE = re.compile(r'250-AUTH METHODS=([^ ]+) COOKIEFILE="([^"]+)"')
_VERSION_RE = re.compile(r'250-VERSION Tor="([^"]+)"(.*)')
_KEY_VALUE_RE = re.compile(r"250-([^=]+)=(.*)")
_DATA_KEY_RE = re.compile(r"250\+([^=]+)=(.*)")
_SERVICE_ID_RE = re.compile(r"250-ServiceID=(.+)")
_PRIVATE_KEY_RE = re.compile(r"250-PrivateKey=([^:]+):(.+)")
_CLIENT_AUTH_RE = re.compile(r"250-ClientAuth=([^:]+):(.+)")


def split_lines(reply: str) -> list[str]:
    """Split a reply into lines without their line endings."""
    lines = _LINE_ENDING_RE.split(reply)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _expect_ok(lines: list[str], reply: str) -> list[str]:
    """Check the final line is "250 OK" and return the lines before it."""
    if not lines or lines[-1] != OK_LINE:
        raise GrammarMismatch(f"Expected final {OK_LINE!r}", reply)
    return lines[:-1]


def parse_ok(reply: str) -> None:
    """
    Parse a bare "250 OK" reply.

    Raises:
        GrammarMismatch: If the reply is anything else
    """
    lines = split_lines(reply)
    if lines != [OK_LINE]:
        raise GrammarMismatch(f"Expected {OK_LINE!r}", reply)


def parse_authenticate(reply: str) -> None:
    """Parse an AUTHENTICATE reply."""
    parse_ok(reply)


def parse_protocolinfo(reply: str) -> ProtocolInfo:
    """
    Parse a PROTOCOLINFO reply.

    Raises:
        GrammarMismatch: If the reply does not have the expected four lines
        UnknownAuthMethod: If an advertised method is not known
    """
    lines = split_lines(reply)
    if len(lines) != 4:
        raise GrammarMismatch(f"Expected 4 lines, got {len(lines)}", reply)

    if lines[0] != "250-PROTOCOLINFO 1":
        raise GrammarMismatch("Expected '250-PROTOCOLINFO 1'", reply)

    auth = _AUTH_RE.fullmatch(lines[1])
    if auth is None:
        raise GrammarMismatch("Malformed AUTH line", reply)
    try:
        methods = tuple(AuthMethod.from_token(token) for token in auth.group(1).split(","))
    except UnknownAuthMethod as e:
        e.reply = reply
        raise

    # Anything after the closing quote is allowed and ignored
    version = _VERSION_RE.fullmatch(lines[2])
    if version is None:
        raise GrammarMismatch("Malformed VERSION line", reply)

    _expect_ok(lines[3:], reply)

    return ProtocolInfo(
        auth_methods=methods,
        version=version.group(1),
        cookie_file=auth.group(2),
    )


def parse_getinfo(reply: str) -> dict[str, str]:
    """
    Parse a GETINFO reply into a key -> value mapping.

    Values are taken verbatim up to the end of the line. Data replies
    ("250+key=" followed by lines and a lone ".") are joined with newlines.
    A repeated key keeps the last value.

    Raises:
        GrammarMismatch: If a line is not a key=value line
    """
    body = _expect_ok(split_lines(reply), reply)

    info: dict[str, str] = {}
    i = 0
    while i < len(body):
        line = body[i]

        match = _KEY_VALUE_RE.fullmatch(line)
        if match:
            info[match.group(1)] = match.group(2)
            i += 1
            continue

        match = _DATA_KEY_RE.fullmatch(line)
        if match is None:
            raise GrammarMismatch(f"Malformed GETINFO line: {line!r}", reply)

        data_lines = [match.group(2)] if match.group(2) else []
        i += 1
        while i < len(body) and body[i] != ".":
            # Leading dots are doubled on the wire
            data_lines.append(body[i][1:] if body[i].startswith("..") else body[i])
            i += 1
        if i >= len(body):
            raise GrammarMismatch("Unterminated data reply", reply)
        info[match.group(1)] = "\n".join(data_lines)
        i += 1  # skip "."

    return info


def parse_add_onion(reply: str) -> AddOnionReply:
    """
    Parse an ADD_ONION reply.

    The ServiceID line is mandatory. The PrivateKey line is absent when the
    key was supplied by the caller or discarded. ClientAuth lines follow
    when client authorization was requested.

    Raises:
        GrammarMismatch: If the reply does not match
        UnknownKeyType: If the private key type is not known
    """
    body = _expect_ok(split_lines(reply), reply)
    if not body:
        raise GrammarMismatch("Missing ServiceID line", reply)

    service = _SERVICE_ID_RE.fullmatch(body[0])
    if service is None:
        raise GrammarMismatch("Expected ServiceID line", reply)
    i = 1

    key: tuple[KeyType, str] | None = None
    if i < len(body):
        private_key = _PRIVATE_KEY_RE.fullmatch(body[i])
        if private_key:
            try:
                key_type = KeyType.from_token(private_key.group(1))
            except UnknownKeyType as e:
                e.reply = reply
                raise
            key = (key_type, private_key.group(2))
            i += 1

    client_auth: list[ClientAuth] = []
    while i < len(body):
        auth = _CLIENT_AUTH_RE.fullmatch(body[i])
        if auth is None:
            raise GrammarMismatch(f"Unexpected ADD_ONION line: {body[i]!r}", reply)
        client_auth.append(ClientAuth(name=auth.group(1), blob=auth.group(2)))
        i += 1

    return AddOnionReply(
        service_id=ServiceID(service.group(1)),
        key=key,
        client_auth=tuple(client_auth),
    )


def parse_error_reply(reply: str) -> tuple[str, str]:
    """
    Parse the status code and message text of any reply.

    The status code is taken from the final line. The message is the text
    of every status line after its separator, joined with newlines.

    Raises:
        GrammarMismatch: If the final line is not a status line
    """
    lines = split_lines(reply)
    final = _STATUS_LINE_RE.fullmatch(lines[-1]) if lines else None
    if final is None or final.group(2) != " ":
        raise GrammarMismatch("Missing final status line", reply)

    messages = []
    for line in lines:
        match = _STATUS_LINE_RE.fullmatch(line)
        if match:
            messages.append(match.group(3))
    return final.group(1), "\n".join(messages)


def raise_for_status(reply: str) -> None:
    """
    Raise ErrorReply if Tor answered with a non-2xx status.

    Raises:
        ErrorReply: With Tor's status code and message
        GrammarMismatch: If the reply has no final status line
    """
    status, message = parse_error_reply(reply)
    if not status.startswith("2"):
        raise ErrorReply(status, message, reply)
