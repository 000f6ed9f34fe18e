"""Kite Connect broker integration."""

from .client import KITE_API_VERSION, KiteConnectClient, KiteSession, generate_checksum

__all__ = [
    "KITE_API_VERSION",
    "KiteConnectClient",
    "KiteSession",
    "generate_checksum",
]
