from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import FlightFinderError
from .flight_search import FlightSearchClient
from .formatter import flight_to_dict, format_duration
from .models import TRAVEL_CLASSES, FlattenedFlight, Itinerary, SearchRequest, TimeConstraint
from .time_filter import parse_clock

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# ────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        logger.error(
            "Missing or invalid configuration. Set AMADEUS_CLIENT_ID and "
            "AMADEUS_CLIENT_SECRET in the environment or .env file."
        )
        logger.error("Settings error: %s", exc)
        sys.exit(1)


def _codes(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(c.strip().upper() for c in value.split(",") if c.strip())


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


def _validate_clock(ctx, param, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        parse_clock(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    return value


def _echo_itinerary(label: str, itinerary: Itinerary) -> None:
    click.echo(f"\n{label} ({format_duration(itinerary.duration) or '?'}):")
    for i, seg in enumerate(itinerary.segments, start=1):
        dep = seg.departure.at.isoformat(timespec="minutes") if seg.departure.at else "?"
        arr = seg.arrival.at.isoformat(timespec="minutes") if seg.arrival.at else "?"
        click.echo(
            f"  {i}. {seg.departure.airport} {dep} → {seg.arrival.airport} {arr}"
        )
        click.echo(
            f"     {seg.carrier_name or seg.carrier_code} {seg.flight_number} "
            f"({seg.aircraft_name or seg.aircraft_code or 'n/a'}) "
            f"{format_duration(seg.duration) or ''}".rstrip()
        )


def _echo_flight(index: int, flight: FlattenedFlight) -> None:
    click.echo(f"\n--- Flight Option {index} ---")
    click.echo(f"Price: {flight.price.total} {flight.price.currency}")
    click.echo(f"Airline: {flight.validating_airline or 'n/a'}")
    if flight.bookable_seats is not None:
        click.echo(f"Seats: {flight.bookable_seats}")
    _echo_itinerary("Outbound", flight.outbound)
    if flight.return_ is not None:
        _echo_itinerary("Return", flight.return_)


# ────────────────────────────────────────────────────────────────
# Commands
# ────────────────────────────────────────────────────────────────


@click.group()
def cli() -> None:
    """Command line interface."""


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.option("--departure-date", type=click.DateTime(["%Y-%m-%d"]), required=True)
@click.option("--return-date", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--adults", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--children", type=click.IntRange(min=0), default=0)
@click.option("--infants", type=click.IntRange(min=0), default=0)
@click.option(
    "--travel-class",
    type=click.Choice(TRAVEL_CLASSES, case_sensitive=False),
    default="ECONOMY",
    show_default=True,
)
@click.option("--include-airlines", help="Comma separated IATA carrier codes")
@click.option("--exclude-airlines", help="Comma separated IATA carrier codes")
@click.option("--non-stop/--with-stops", default=None, help="Omit to let the API decide")
@click.option("--currency", default=None, help="Defaults to DEFAULT_CURRENCY")
@click.option("--max-price", type=click.IntRange(min=1), default=None)
@click.option("--max", "max_results", type=click.IntRange(min=1), default=None)
@click.option("--min-departure-time", callback=_validate_clock, help="HH:MM")
@click.option("--max-arrival-time", callback=_validate_clock, help="HH:MM")
@click.option("--arrival-date", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option("--test-env/--prod-env", default=None, help="Override AMADEUS_TEST_ENV")
@click.option("--json", "as_json", is_flag=True, help="Print flights as JSON")
def search(
    origin: str,
    destination: str,
    departure_date: datetime,
    return_date: Optional[datetime],
    adults: int,
    children: int,
    infants: int,
    travel_class: str,
    include_airlines: Optional[str],
    exclude_airlines: Optional[str],
    non_stop: Optional[bool],
    currency: Optional[str],
    max_price: Optional[int],
    max_results: Optional[int],
    min_departure_time: Optional[str],
    max_arrival_time: Optional[str],
    arrival_date: Optional[datetime],
    test_env: Optional[bool],
    as_json: bool,
) -> None:
    """Search flight offers and print those matching the time window."""
    settings = _load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    if (max_arrival_time is None) != (arrival_date is None):
        raise click.UsageError(
            "--max-arrival-time and --arrival-date must be given together"
        )

    try:
        request = SearchRequest(
            origin=origin.upper(),
            destination=destination.upper(),
            departure_date=departure_date.date(),
            return_date=_as_date(return_date),
            adults=adults,
            children=children,
            infants=infants,
            travel_class=travel_class.upper(),
            included_airline_codes=_codes(include_airlines),
            excluded_airline_codes=_codes(exclude_airlines),
            non_stop=non_stop,
            currency_code=(currency or settings.currency).upper(),
            max_price=max_price,
            max_results=max_results or settings.max_results,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    constraint = TimeConstraint(
        min_departure_time=min_departure_time,
        max_arrival_time=max_arrival_time,
        arrival_date=_as_date(arrival_date),
    )

    if test_env is not None:
        settings = settings.model_copy(update={"test_env": test_env})
    client = FlightSearchClient.from_settings(settings)

    try:
        results = client.search_and_filter(request, constraint)
    except FlightFinderError as exc:
        raise click.ClickException(exc.message) from exc

    if as_json:
        click.echo(
            json.dumps(
                {
                    "totalResults": results.total_results,
                    "message": results.message,
                    "flights": [flight_to_dict(f) for f in results.flights],
                },
                indent=2,
            )
        )
        return

    if not results.flights:
        logger.info(results.message or "No flights found")
        return

    click.echo(f"Found {results.total_results} flights")
    click.echo(f"Flights meeting your time requirements: {len(results.flights)}")
    for i, flight in enumerate(results.flights, start=1):
        _echo_flight(i, flight)


if __name__ == "__main__":
    cli()
