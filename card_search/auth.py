"""OAuth2 client-credentials token lifecycle for the Battle.net API."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx

from card_search.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """A bearer token and the instant (epoch seconds) it stops being valid."""

    access_token: str
    expires_at: float
    token_type: str = "bearer"
    sub: str = ""

    def is_valid(self, now: float) -> bool:
        return bool(self.access_token) and now < self.expires_at


class TokenManager:
    """Owns one bearer token and refreshes it lazily.

    ``ensure_token`` is a no-op while the cached token is valid. Otherwise it
    performs a client-credentials exchange against ``token_url``. Refreshes
    are serialized: concurrent callers wait on the same lock and reuse the
    token obtained by whichever caller got there first.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        http: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._http = http
        self._clock = clock
        self._token: Optional[Token] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[Token]:
        return self._token

    def invalidate(self) -> None:
        """Forget the cached token so the next call re-exchanges."""
        self._token = None

    async def ensure_token(self) -> Token:
        """Return a valid token, exchanging credentials if needed."""
        token = self._token
        if token is not None and token.is_valid(self._clock()):
            return token

        async with self._lock:
            # Another waiter may have refreshed while we were blocked.
            token = self._token
            if token is not None and token.is_valid(self._clock()):
                return token
            self._token = await self._exchange()
            return self._token

    async def auth_header(self) -> Dict[str, str]:
        token = await self.ensure_token()
        return {"Authorization": f"Bearer {token.access_token}"}

    async def _exchange(self) -> Token:
        issued_at = self._clock()
        try:
            resp = await self._http.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                auth=(self._client_id, self._client_secret),
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"Token exchange failed: {exc}") from exc

        if not resp.is_success:
            raise AuthError(
                f"Upstream API provider returned {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
            access_token = str(data.get("access_token") or "")
            expires_in = float(data.get("expires_in", 0))
        except (ValueError, TypeError, AttributeError) as exc:
            raise AuthError(
                f"Malformed token response: {exc}",
                status=resp.status_code,
                body=resp.text,
            ) from exc

        if not access_token:
            raise AuthError(
                "Token response did not contain an access token",
                status=resp.status_code,
                body=resp.text,
            )

        token = Token(
            access_token=access_token,
            expires_at=issued_at + expires_in,
            token_type=str(data.get("token_type", "bearer")),
            sub=str(data.get("sub", "")),
        )
        logger.info("Obtained new access token, valid for %ds", int(expires_in))
        return token
