from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from .auth import Credentials, TokenManager, base_url_for
from .config import Settings
from .errors import SearchError
from .formatter import format_flight_details
from .models import FlattenedFlight, FormattedResults, SearchRequest, TimeConstraint
from .time_filter import filter_flights_by_time

logger = logging.getLogger(__name__)

SEARCH_PATH = "/v2/shopping/flight-offers"


def build_query(request: SearchRequest) -> Dict[str, str]:
    """Translate *request* into Flight Offers Search query parameters.

    Mandatory keys are always present; optional ones only when set.
    """
    query: Dict[str, str] = {
        "originLocationCode": request.origin.upper(),
        "destinationLocationCode": request.destination.upper(),
        "departureDate": request.departure_date.isoformat(),
        "adults": str(request.adults),
    }

    if request.return_date is not None:
        query["returnDate"] = request.return_date.isoformat()
    if request.children > 0:
        query["children"] = str(request.children)
    if request.infants > 0:
        query["infants"] = str(request.infants)
    if request.travel_class:
        query["travelClass"] = request.travel_class
    if request.included_airline_codes:
        query["includedAirlineCodes"] = ",".join(request.included_airline_codes)
    if request.excluded_airline_codes:
        query["excludedAirlineCodes"] = ",".join(request.excluded_airline_codes)
    if request.non_stop is not None:
        query["nonStop"] = "true" if request.non_stop else "false"
    if request.currency_code:
        query["currencyCode"] = request.currency_code
    if request.max_price is not None:
        query["maxPrice"] = str(request.max_price)
    if request.max_results is not None:
        query["max"] = str(request.max_results)

    return query


class FlightSearchClient:
    """
    Klient Amadeus Flight Offers Search (*/v2/shopping/flight-offers*).
    """

    def __init__(
        self,
        credentials: Credentials,
        test_environment: bool = False,
        *,
        timeout: Optional[float] = 15,
        token_manager: Optional[TokenManager] = None,
    ) -> None:
        self.base_url = base_url_for(test_environment)
        self.test_environment = test_environment
        self.timeout = timeout
        self.tokens = token_manager or TokenManager(
            credentials, self.base_url, timeout=timeout
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FlightSearchClient":
        return cls(
            Credentials(settings.client_id, settings.client_secret),
            test_environment=settings.test_env,
            timeout=settings.request_timeout_s,
        )

    # ──────────────────────────────────────────────────────────

    def search_flights(self, request: SearchRequest) -> Dict[str, Any]:
        """Run the search and return the vendor payload unmodified."""
        token = self.tokens.ensure_valid_token()
        query = build_query(request)

        logger.info(
            "Searching %s ➔ %s on %s",
            query["originLocationCode"],
            query["destinationLocationCode"],
            query["departureDate"],
        )
        try:
            resp = requests.get(
                f"{self.base_url}{SEARCH_PATH}",
                params=query,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SearchError(f"Flight search failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            detail = _first_error_detail(resp) or (
                f"HTTP {resp.status_code} – {resp.text[:120]}"
            )
            raise SearchError(
                f"Flight search failed: {detail}", status_code=resp.status_code
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise SearchError(
                f"Flight search failed: invalid JSON body ({exc})",
                status_code=resp.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise SearchError(
                "Flight search failed: unexpected response body",
                status_code=resp.status_code,
            )

        logger.info("Received %d offers", len(payload.get("data") or []))
        return payload

    def format_flight_details(self, payload: Dict[str, Any]) -> FormattedResults:
        return format_flight_details(payload)

    def filter_flights_by_time(
        self,
        flights: Iterable[FlattenedFlight],
        constraint: Optional[TimeConstraint],
    ) -> List[FlattenedFlight]:
        return filter_flights_by_time(flights, constraint)

    def search_and_filter(
        self, request: SearchRequest, constraint: Optional[TimeConstraint] = None
    ) -> FormattedResults:
        """Search, flatten and filter in one go.

        ``total_results`` keeps the vendor's count; ``flights`` holds only the
        matching ones.
        """
        results = self.format_flight_details(self.search_flights(request))
        if constraint is None or not results.flights:
            return results

        flights = self.filter_flights_by_time(results.flights, constraint)
        return FormattedResults(
            total_results=results.total_results,
            flights=flights,
            message=None if flights else "No flights match the time constraints",
        )


def _first_error_detail(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    errors = body.get("errors") or []
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("detail") or errors[0].get("title")
    return None


__all__ = ["SEARCH_PATH", "FlightSearchClient", "build_query"]
