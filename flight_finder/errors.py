from __future__ import annotations

from typing import Optional


class FlightFinderError(RuntimeError):
    """Błąd w komunikacji z Amadeus API."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(FlightFinderError):
    """Token exchange failed (bad credentials, network, malformed body)."""


class SearchError(FlightFinderError):
    """Flight-offers search was rejected or could not be completed."""


__all__ = ["FlightFinderError", "AuthenticationError", "SearchError"]
