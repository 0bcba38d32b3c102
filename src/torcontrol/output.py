"""
Diagnostic output for torcontrol.

Three independent levels, all disabled by default:

    explain  - what the tool is doing and why, in plain words
    verbose  - progress information
    debug    - protocol traffic (commands sent, replies received)

Everything is written to stderr so stdout stays clean for command results.
"""

import sys

_explain = False
_verbose = False
_debug = False


def configure(explain: bool = False, verbose: bool = False, debug: bool = False) -> None:
    """Enable or disable output levels."""
    global _explain, _verbose, _debug  # pylint: disable=global-statement
    _explain = explain
    _verbose = verbose
    _debug = debug


def is_explain() -> bool:
    """Check if explain output is enabled."""
    return _explain


def is_verbose() -> bool:
    """Check if verbose output is enabled."""
    return _verbose


def is_debug() -> bool:
    """Check if debug output is enabled."""
    return _debug


def explain(message: str) -> None:
    """Print an explanation of the current step."""
    if _explain:
        print(f"# {message}", file=sys.stderr)


def verbose(message: str) -> None:
    """Print a progress message."""
    if _verbose:
        print(f"[verbose] {message}", file=sys.stderr)


def debug(message: str) -> None:
    """Print a debug message, one prefixed line per input line."""
    if _debug:
        for line in message.rstrip("\r\n").splitlines() or [""]:
            print(f"[debug] {line}", file=sys.stderr)
