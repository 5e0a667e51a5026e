from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .models import FlattenedFlight, TimeConstraint

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock(value: str) -> int:
    """Zamienia ``HH:MM`` na liczbę minut od północy."""
    match = _CLOCK_RE.match(value.strip()) if value else None
    if not match:
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return hours * 60 + minutes


def _departs_late_enough(flight: FlattenedFlight, min_minutes: Optional[int]) -> bool:
    if min_minutes is None or not flight.outbound.segments:
        return True
    departure = flight.outbound.segments[0].departure.at
    if departure is None:
        return True
    return departure.hour * 60 + departure.minute >= min_minutes


def _returns_early_enough(
    flight: FlattenedFlight, max_minutes: Optional[int], constraint: TimeConstraint
) -> bool:
    if max_minutes is None or constraint.arrival_date is None:
        return True
    if flight.return_ is None or not flight.return_.segments:
        return True
    arrival = flight.return_.segments[-1].arrival.at
    if arrival is None:
        return True

    arrival_date = arrival.date()
    if arrival_date != constraint.arrival_date:
        return arrival_date < constraint.arrival_date
    return arrival.hour * 60 + arrival.minute < max_minutes


def filter_flights_by_time(
    flights: Iterable[FlattenedFlight], constraint: Optional[TimeConstraint]
) -> List[FlattenedFlight]:
    """Keep flights that fit the requested time window.

    * outbound: the first segment must leave at or after
      ``min_departure_time`` (local clock),
    * return: the last segment must land before ``arrival_date`` or on that
      day strictly before ``max_arrival_time``. One-way flights pass.

    Input order is preserved; nothing is mutated.
    """
    if constraint is None:
        return list(flights)

    min_minutes = (
        parse_clock(constraint.min_departure_time)
        if constraint.min_departure_time
        else None
    )
    max_minutes = (
        parse_clock(constraint.max_arrival_time)
        if constraint.max_arrival_time
        else None
    )

    return [
        flight
        for flight in flights
        if _departs_late_enough(flight, min_minutes)
        and _returns_early_enough(flight, max_minutes, constraint)
    ]


__all__ = ["parse_clock", "filter_flights_by_time"]
