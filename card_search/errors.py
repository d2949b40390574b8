"""Error types raised by the API client."""

from __future__ import annotations

from typing import Optional


class CardSearchError(Exception):
    """Base class for every error raised while talking to the game-data API."""


class AuthError(CardSearchError):
    """The client-credentials token exchange failed."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class UpstreamError(CardSearchError):
    """A resource endpoint answered with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Upstream API provider returned {status}: {body}")
        self.status = status
        self.body = body


class TransportError(CardSearchError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""
