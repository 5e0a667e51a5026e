from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

PRODUCTION_URL = "https://api.amadeus.com"
TEST_URL = "https://test.api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"


def base_url_for(test_environment: bool) -> str:
    return TEST_URL if test_environment else PRODUCTION_URL


@dataclass(frozen=True, slots=True)
class Credentials:
    client_id: str
    client_secret: str

    def masked_id(self) -> str:
        return f"{self.client_id[:8]}..."

    def __repr__(self) -> str:
        return f"Credentials(client_id={self.masked_id()!r}, client_secret='***')"


@dataclass(frozen=True, slots=True)
class Token:
    access_token: str
    expires_at: float  # epoch seconds

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenManager:
    """
    OAuth2 client-credentials token cache for the Amadeus API.

    The token is refreshed lazily: only when none is held or ``now`` has
    reached the stored expiry. A failed refresh is raised immediately.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = PRODUCTION_URL,
        *,
        timeout: Optional[float] = 15,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._clock = clock
        self._token: Optional[Token] = None

    @property
    def token(self) -> Optional[Token]:
        return self._token

    @property
    def is_test(self) -> bool:
        return self.base_url == TEST_URL

    # ──────────────────────────────────────────────────────────

    def ensure_valid_token(self) -> str:
        """Return a usable bearer token, refreshing it first if needed."""
        token = self._token
        if token is None or not token.is_valid(self._clock()):
            token = self.refresh()
        return token.access_token

    def refresh(self) -> Token:
        """Exchange client credentials for a new token."""
        url = f"{self.base_url}{TOKEN_PATH}"
        logger.info(
            "Authenticating with %s environment: %s",
            "TEST" if self.is_test else "PRODUCTION",
            url,
        )
        logger.info("API key: %s", self.credentials.masked_id())

        try:
            resp = requests.post(
                url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.credentials.client_id,
                    "client_secret": self.credentials.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Authentication failed: %s", exc)
            raise AuthenticationError(
                f"Failed to get access token: {exc}"
            ) from exc

        if not 200 <= resp.status_code < 300:
            reason = _error_description(resp) or (
                f"HTTP {resp.status_code} – {resp.text[:120]}"
            )
            logger.warning("Authentication failed (HTTP %s)", resp.status_code)
            raise AuthenticationError(
                f"Failed to get access token: {reason}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
            access_token = str(payload["access_token"])
            expires_in = float(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError(
                f"Failed to get access token: malformed response ({exc})",
                status_code=resp.status_code,
            ) from exc

        self._token = Token(access_token, self._clock() + expires_in)
        logger.info("Token received, valid for %.0f s", expires_in)
        return self._token


def _error_description(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error_description")
    return None


__all__ = [
    "PRODUCTION_URL",
    "TEST_URL",
    "TOKEN_PATH",
    "Credentials",
    "Token",
    "TokenManager",
    "base_url_for",
]
