"""
Test fixtures for torcontrol tests.

Sample control protocol replies, as Tor sends them (CRLF line endings)
unless noted otherwise.
"""

COOKIE_FILE = "/var/run/tor/control.authcookie"

# PROTOCOLINFO with "\n" line endings
PROTOCOLINFO_COOKIE_LF = (
    "250-PROTOCOLINFO 1\n"
    '250-AUTH METHODS=COOKIE,SAFECOOKIE COOKIEFILE="/var/run/tor/control.authcookie"\n'
    '250-VERSION Tor="0.1.2.3"\n'
    "250 OK"
)

PROTOCOLINFO_COOKIE = (
    "250-PROTOCOLINFO 1\r\n"
    '250-AUTH METHODS=COOKIE,SAFECOOKIE COOKIEFILE="/var/run/tor/control.authcookie"\r\n'
    '250-VERSION Tor="0.4.8.10"\r\n'
    "250 OK\r\n"
)

PROTOCOLINFO_PASSWORD = (
    "250-PROTOCOLINFO 1\r\n"
    '250-AUTH METHODS=HASHEDPASSWORD COOKIEFILE="/var/run/tor/control.authcookie"\r\n'
    '250-VERSION Tor="0.4.8.10"\r\n'
    "250 OK\r\n"
)

PROTOCOLINFO_ALL = (
    "250-PROTOCOLINFO 1\r\n"
    "250-AUTH METHODS=COOKIE,SAFECOOKIE,HASHEDPASSWORD "
    'COOKIEFILE="/home/user/.tor/control_auth_cookie"\r\n'
    '250-VERSION Tor="0.4.8.10" extra=1\r\n'
    "250 OK\r\n"
)

OK = "250 OK\r\n"

GETINFO_VERSION_LF = "250-version=0.1.2.3\n250 OK"

GETINFO_MULTI = (
    "250-version=0.4.8.10\r\n"
    "250-config-file=/etc/tor/torrc\r\n"
    "250-dormant=0\r\n"
    "250 OK\r\n"
)

GETINFO_DATA = (
    "250+config-text=\r\n"
    "ControlPort 9051\r\n"
    "..hidden\r\n"
    "CookieAuthentication 1\r\n"
    ".\r\n"
    "250-version=0.4.8.10\r\n"
    "250 OK\r\n"
)

ADD_ONION_RSA_LF = "250-ServiceID=rdwu5tfgmibbgvff\n250-PrivateKey=RSA1024:MIIC\n250 OK"

ADD_ONION_NO_KEY = "250-ServiceID=rdwu5tfgmibbgvff\r\n250 OK\r\n"

ED25519_SERVICE_ID = "pg6mmjiyjmcrsslvykfwnntlaru7p5svn6y2ymmju6nubxndf4pscryd"

ADD_ONION_ED25519 = (
    f"250-ServiceID={ED25519_SERVICE_ID}\r\n"
    "250-PrivateKey=ED25519-V3:OGS1XhzVBdGYLCyb+ezA0fz5hY3E6W1YH0s4EpQx1E8=\r\n"
    "250 OK\r\n"
)

ADD_ONION_CLIENT_AUTH = (
    "250-ServiceID=rdwu5tfgmibbgvff\r\n"
    "250-PrivateKey=RSA1024:MIIC\r\n"
    "250-ClientAuth=alice:dGVzdGJsb2I=\r\n"
    "250 OK\r\n"
)

ERROR_UNRECOGNIZED = '510 Unrecognized command "FOO"\r\n'

ERROR_BAD_PASSWORD = (
    "515 Authentication failed: Password did not match HashedControlPassword value "
    "from configuration\r\n"
)

ERROR_UNKNOWN_ONION = "552 Unknown Onion Service id\r\n"
