"""
torcontrol - A client for the Tor control protocol.

Torcontrol authenticates to a running Tor daemon over its control port and
issues administrative commands: ephemeral onion services, GETINFO queries
and signals. It ships a CLI and a small HTTP API on top of the client.
"""

__version__ = "0.1.0"
