from __future__ import annotations

import datetime as dt
import re
from dataclasses import asdict
from typing import Any, Mapping, Optional

from .models import (
    Endpoint,
    FlattenedFlight,
    FormattedResults,
    Itinerary,
    Price,
    Segment,
)

NO_FLIGHTS_MESSAGE = "No flights found"

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?$")


def format_duration(iso_duration: Optional[str]) -> Optional[str]:
    """Render ``PT2H30M`` as ``2h 30m``; anything unparsable is returned as is."""
    if not iso_duration:
        return iso_duration
    match = _DURATION_RE.match(iso_duration)
    if not match or not (match.group(1) or match.group(2)):
        return iso_duration
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return f"{hours}h {minutes}m"


def _parse_local(value: Optional[str]) -> Optional[dt.datetime]:
    """Parse the vendor's local ``YYYY-MM-DDTHH:MM:SS`` timestamp."""
    if not value:
        return None
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_date(value: Optional[str]) -> Optional[dt.date]:
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value[:10])
    except ValueError:
        return None


def _endpoint(raw: Mapping[str, Any], locations: Mapping[str, Any]) -> Endpoint:
    code = raw.get("iataCode", "")
    location = locations.get(code) or {}
    return Endpoint(
        airport=code,
        at=_parse_local(raw.get("at")),
        terminal=raw.get("terminal"),
        city=location.get("cityCode"),
        country=location.get("countryCode"),
    )


def format_itinerary(
    itinerary: Mapping[str, Any], dictionaries: Mapping[str, Any]
) -> Itinerary:
    """Mapuje jeden kierunek podróży na obiekt Itinerary."""
    carriers = dictionaries.get("carriers") or {}
    aircraft = dictionaries.get("aircraft") or {}
    locations = dictionaries.get("locations") or {}

    segments = []
    for seg in itinerary.get("segments") or []:
        carrier_code = seg.get("carrierCode")
        aircraft_code = (seg.get("aircraft") or {}).get("code")
        segments.append(
            Segment(
                departure=_endpoint(seg.get("departure") or {}, locations),
                arrival=_endpoint(seg.get("arrival") or {}, locations),
                carrier_code=carrier_code,
                carrier_name=carriers.get(carrier_code),
                flight_number=seg.get("number"),
                aircraft_code=aircraft_code,
                aircraft_name=aircraft.get(aircraft_code),
                duration=seg.get("duration"),
                stops=int(seg.get("numberOfStops") or 0),
            )
        )
    return Itinerary(duration=itinerary.get("duration"), segments=segments)


def format_offer(
    offer: Mapping[str, Any], dictionaries: Mapping[str, Any]
) -> FlattenedFlight:
    price = offer.get("price") or {}
    itineraries = offer.get("itineraries") or []
    carriers = dictionaries.get("carriers") or {}
    validating = offer.get("validatingAirlineCodes") or []

    return FlattenedFlight(
        id=str(offer.get("id", "")),
        price=Price(
            total=price.get("total", ""),
            currency=price.get("currency", ""),
            base=price.get("base"),
        ),
        outbound=(
            format_itinerary(itineraries[0], dictionaries)
            if itineraries
            else Itinerary(duration=None)
        ),
        return_=(
            format_itinerary(itineraries[1], dictionaries)
            if len(itineraries) > 1
            else None
        ),
        validating_airline=carriers.get(validating[0]) if validating else None,
        bookable_seats=offer.get("numberOfBookableSeats"),
        last_ticketing_date=_parse_date(offer.get("lastTicketingDate")),
    )


def format_flight_details(payload: Mapping[str, Any]) -> FormattedResults:
    """Flatten a flight-offers search payload.

    Every offer is resolved against the payload's ``dictionaries`` block;
    codes that are missing from it simply resolve to ``None``.
    """
    offers = payload.get("data") or []
    if not offers:
        return FormattedResults(total_results=0, flights=[], message=NO_FLIGHTS_MESSAGE)

    dictionaries = payload.get("dictionaries") or {}
    flights = [format_offer(offer, dictionaries) for offer in offers]

    count = (payload.get("meta") or {}).get("count")
    return FormattedResults(
        total_results=int(count) if count is not None else len(flights),
        flights=flights,
    )


def flight_to_dict(flight: FlattenedFlight) -> dict[str, Any]:
    """JSON-friendly representation (dates as ISO strings, ``return`` key)."""

    def _convert(value: Any) -> Any:
        if isinstance(value, (dt.date, dt.datetime)):
            return value.isoformat()
        if isinstance(value, dict):
            return {k: _convert(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_convert(v) for v in value]
        return value

    data = _convert(asdict(flight))
    data["return"] = data.pop("return_")
    return data


__all__ = [
    "NO_FLIGHTS_MESSAGE",
    "format_duration",
    "format_itinerary",
    "format_offer",
    "format_flight_details",
    "flight_to_dict",
]
