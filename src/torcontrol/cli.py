"""
CLI interface for torcontrol.

Provides command-line access to a running Tor daemon's control port.
"""

import argparse
import sys
import traceback
from collections.abc import Callable

from torcontrol import __version__, config, output
from torcontrol.control import (
    AddOnionFlag,
    AuthenticatedController,
    Controller,
    ControllerError,
    ErrorReply,
    KeyType,
    Signal,
)


def open_session(args: argparse.Namespace) -> AuthenticatedController:
    """
    Connect and authenticate using the global CLI options.

    Password authentication is used when a password is given (--password or
    TORCONTROL_PASSWORD) unless --cookie forces cookie authentication.
    """
    controller = Controller.connect(args.address, timeout=args.timeout)
    try:
        password = args.password or config.get_password()
        if password is not None and not args.cookie:
            return controller.authenticate_password(password)
        return controller.authenticate_cookie()
    except BaseException:
        controller.close()
        raise


def _report_error(e: Exception) -> int:
    """Print an error and return the exit code."""
    if isinstance(e, ErrorReply):
        print(f"Error: Tor replied {e.status}: {e.message}", file=sys.stderr)
    else:
        print(f"Error: {e}", file=sys.stderr)
    if output.is_debug():
        traceback.print_exc()
    return 1


def cmd_version(args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
    """Display the torcontrol version."""
    print(__version__)
    return 0


def cmd_protocolinfo(args: argparse.Namespace) -> int:
    """Show the PROTOCOLINFO negotiation result (no authentication needed)."""
    try:
        output.explain("Connecting to the control port without authenticating")
        with Controller.connect(args.address, timeout=args.timeout) as controller:
            info = controller.protocol_info()

        print(f"Tor version:   {info.version}")
        print(f"Auth methods:  {', '.join(m.value for m in info.auth_methods)}")
        print(f"Cookie file:   {info.cookie_file}")
        return 0

    except (ControllerError, ValueError) as e:
        return _report_error(e)


def cmd_getinfo(args: argparse.Namespace) -> int:
    """Query GETINFO fields."""
    try:
        with open_session(args) as session:
            info = session.get_info(args.fields)

        for key, value in info.items():
            if "\n" in value:
                print(f"{key}=")
                print(value)
            else:
                print(f"{key}={value}")
        return 0

    except (ControllerError, ValueError) as e:
        return _report_error(e)


def cmd_add_onion(args: argparse.Namespace) -> int:
    """Create an ephemeral onion service."""
    try:
        key_type = KeyType(args.key_type)
        flags = []
        if args.discard_pk:
            flags.append(AddOnionFlag.DISCARD_PK)
        if args.detach:
            flags.append(AddOnionFlag.DETACH)

        with open_session(args) as session:
            if args.key:
                service = session.add_onion_with_key(
                    key_type, args.key, args.port, target=args.target, flags=flags
                )
            else:
                service = session.add_onion(
                    args.port, key_type=key_type, target=args.target, flags=flags
                )

            print(f"Onion address: {service.onion_address}")
            print(f"Key type:      {service.key_type}")
            if service.private_key is not None:
                print(f"Private key:   {service.key_type}:{service.private_key}")
            for client in service.client_auth:
                print(f"Client auth:   {client.name}:{client.blob}")

            if not args.detach:
                # The service only lives as long as this control connection
                print("Service is active until interrupted (Ctrl+C)...", file=sys.stderr)
                try:
                    input()
                except (EOFError, KeyboardInterrupt):
                    pass
        return 0

    except (ControllerError, ValueError) as e:
        return _report_error(e)


def cmd_del_onion(args: argparse.Namespace) -> int:
    """Remove an onion service."""
    try:
        service_id = args.service_id.removesuffix(".onion")
        with open_session(args) as session:
            session.delete_onion(service_id)
        print(f"Removed {service_id}")
        return 0

    except (ControllerError, ValueError) as e:
        return _report_error(e)


def cmd_signal(args: argparse.Namespace) -> int:
    """Send a signal to Tor."""
    try:
        signal = Signal.from_name(args.name)
        with open_session(args) as session:
            session.signal(signal)
        print(f"Sent {signal}")
        return 0

    except (ControllerError, ValueError) as e:
        return _report_error(e)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="torcontrol",
        description="Talk to a running Tor daemon over its control port",
    )
    parser.add_argument(
        "--address",
        metavar="HOST:PORT",
        default=config.get_address(),
        help="Control port address (default: TORCONTROL_ADDRESS or 127.0.0.1:9051)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=config.get_timeout(),
        help="Seconds to wait for each reply (default: TORCONTROL_TIMEOUT or 30)",
    )
    auth = parser.add_mutually_exclusive_group()
    auth.add_argument("--password", help="Authenticate with a password")
    auth.add_argument("--cookie", action="store_true", help="Force cookie authentication")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Verbose output (-vv for debug)"
    )
    parser.add_argument(
        "-e", "--explain", action="store_true", help="Explain what is being done"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("version", help="Show version")
    subparsers.add_parser("protocolinfo", help="Show Tor version and auth methods")

    getinfo_parser = subparsers.add_parser("getinfo", help="Query runtime information")
    getinfo_parser.add_argument("fields", nargs="+", metavar="FIELD", help="e.g. version")

    onion_parser = subparsers.add_parser("add-onion", help="Create an ephemeral onion service")
    onion_parser.add_argument("--port", type=int, required=True, help="Virtual port")
    onion_parser.add_argument("--target", metavar="ADDR", help="Target (default: same port)")
    onion_parser.add_argument(
        "--key-type",
        choices=[k.value for k in KeyType],
        default=KeyType.BEST.value,
        help="Key type (default: BEST)",
    )
    onion_parser.add_argument("--key", metavar="BLOB", help="Use an existing private key")
    onion_parser.add_argument(
        "--discard-pk", action="store_true", help="Do not return the private key"
    )
    onion_parser.add_argument(
        "--detach", action="store_true", help="Keep the service after disconnecting"
    )

    del_parser = subparsers.add_parser("del-onion", help="Remove an onion service")
    del_parser.add_argument("service_id", metavar="SERVICE_ID", help="Service ID or address")

    signal_parser = subparsers.add_parser("signal", help="Send a signal")
    signal_parser.add_argument(
        "name", metavar="NAME", help=", ".join(s.value for s in Signal)
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # -v enables verbose, -vv enables both verbose and debug
    verbosity = args.verbose
    output.configure(
        explain=args.explain,
        verbose=verbosity >= 1,
        debug=verbosity >= 2,
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands: dict[str, Callable[[argparse.Namespace], int]] = {
        "version": cmd_version,
        "protocolinfo": cmd_protocolinfo,
        "getinfo": cmd_getinfo,
        "add-onion": cmd_add_onion,
        "del-onion": cmd_del_onion,
        "signal": cmd_signal,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
