"""Data models used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

TRAVEL_CLASSES = ("ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST")


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Parameters of a single flight-offers search."""

    origin: str
    destination: str
    departure_date: date
    return_date: Optional[date] = None
    adults: int = 1
    children: int = 0
    infants: int = 0
    travel_class: Optional[str] = "ECONOMY"
    included_airline_codes: Tuple[str, ...] = ()
    excluded_airline_codes: Tuple[str, ...] = ()
    # None = not sent, False = explicitly allow connections
    non_stop: Optional[bool] = None
    currency_code: Optional[str] = "EUR"
    max_price: Optional[int] = None
    max_results: Optional[int] = 10

    def __post_init__(self) -> None:
        for name in ("included_airline_codes", "excluded_airline_codes"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        if not self.origin or not self.origin.strip():
            raise ValueError("origin must be a non-empty IATA code")
        if not self.destination or not self.destination.strip():
            raise ValueError("destination must be a non-empty IATA code")

        for name in ("adults", "children", "infants"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")
        if self.adults < 1:
            raise ValueError("adults must be at least 1")

        if self.max_results is not None and self.max_results < 1:
            raise ValueError("max_results must be greater than 0")
        if self.max_price is not None and self.max_price < 1:
            raise ValueError("max_price must be greater than 0")

        if self.travel_class is not None and self.travel_class not in TRAVEL_CLASSES:
            raise ValueError(
                f"travel_class must be one of {', '.join(TRAVEL_CLASSES)}"
            )
        if self.return_date is not None and self.return_date < self.departure_date:
            raise ValueError("return_date cannot be before departure_date")


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Departure or arrival side of a segment."""

    airport: str
    at: Optional[datetime]
    terminal: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Segment:
    """A single flown leg."""

    departure: Endpoint
    arrival: Endpoint
    carrier_code: Optional[str] = None
    carrier_name: Optional[str] = None
    flight_number: Optional[str] = None
    aircraft_code: Optional[str] = None
    aircraft_name: Optional[str] = None
    duration: Optional[str] = None
    stops: int = 0


@dataclass(frozen=True, slots=True)
class Itinerary:
    duration: Optional[str]
    segments: List[Segment] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Price:
    total: str
    currency: str
    base: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FlattenedFlight:
    """One offer reshaped for reading; derived from the raw payload."""

    id: str
    price: Price
    outbound: Itinerary
    return_: Optional[Itinerary] = None
    validating_airline: Optional[str] = None
    bookable_seats: Optional[int] = None
    last_ticketing_date: Optional[date] = None


@dataclass(slots=True)
class FormattedResults:
    """Result of flattening a search payload.

    ``total_results`` is always present (0 for an empty search), ``message``
    is set only when nothing was found.
    """

    total_results: int
    flights: List[FlattenedFlight] = field(default_factory=list)
    message: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TimeConstraint:
    """Client-side time window; clock values use ``HH:MM``."""

    min_departure_time: Optional[str] = None
    max_arrival_time: Optional[str] = None
    arrival_date: Optional[date] = None


__all__ = [
    "TRAVEL_CLASSES",
    "SearchRequest",
    "Endpoint",
    "Segment",
    "Itinerary",
    "Price",
    "FlattenedFlight",
    "FormattedResults",
    "TimeConstraint",
]
