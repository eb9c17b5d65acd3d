"""
Client module for the airdrop claim server.

Provides an httpx-based client that signs claims locally and submits them.
"""

from .http_client import ClaimClient

__all__ = ["ClaimClient"]
