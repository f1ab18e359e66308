"""Reconciliation of partial / contradictory flight times into one consistent itinerary.

Trust order, highest first:

1. a departure/arrival pair whose arrival is after the departure,
2. the provider's duration field, applied to the departure,
3. DEFAULT_FLIGHT_MINUTES, applied to the departure when the pair is contradictory
   and no duration is available.

The functions here never raise; missing data degrades to '00:00' clock times and the
caller supplied departure date.
"""
import logging
import math
from datetime import datetime, timedelta

from .timeparse import (
    days_between,
    format_minutes_as_duration,
    parse_duration_to_minutes,
    parse_timestamp,
    split_instant,
)
from ..models import FlightTimes, ParsedTimestamp

DEFAULT_FLIGHT_MINUTES = 150  # generic short-haul leg (2h30)
UNKNOWN_TIME = '00:00'


def minutes_between(departure: datetime, arrival: datetime) -> int:
    seconds = (arrival - departure).total_seconds()
    return math.floor(seconds / 60 + 0.5)


def arrival_after(departure: ParsedTimestamp, minutes: int) -> ParsedTimestamp | None:
    try:
        return split_instant(departure.instant + timedelta(minutes=minutes))
    except OverflowError:
        logging.debug('Arrival out of calendar range for %s + %d min', departure.instant, minutes)
        return None


def reconcile(
        departure_raw: str | None,
        arrival_raw: str | None,
        provided_duration_raw: str | None,
        fallback_departure_date: str,
) -> FlightTimes:
    departure = parse_timestamp(departure_raw)
    arrival = parse_timestamp(arrival_raw)
    provided_minutes = parse_duration_to_minutes(provided_duration_raw)

    departure_time = arrival_time = UNKNOWN_TIME
    departure_date = arrival_date = fallback_departure_date
    duration_minutes = provided_minutes

    if departure:
        departure_time, departure_date = departure.time, departure.date
    if arrival:
        arrival_time, arrival_date = arrival.time, arrival.date

    derived: ParsedTimestamp | None = None
    if departure and arrival:
        calculated = minutes_between(departure.instant, arrival.instant)
        if calculated > 0:
            duration_minutes = calculated
        else:
            correction = provided_minutes if provided_minutes > 0 else DEFAULT_FLIGHT_MINUTES
            logging.debug(
                'Arrival %s not after departure %s, rebuilding it with %d min',
                arrival_raw, departure_raw, correction,
            )
            derived = arrival_after(departure, correction)
            if derived:
                duration_minutes = correction
            else:
                arrival_time, arrival_date = UNKNOWN_TIME, fallback_departure_date
                duration_minutes = 0
    elif departure and provided_minutes > 0:
        derived = arrival_after(departure, provided_minutes)

    if derived:
        arrival_time, arrival_date = derived.time, derived.date

    days_difference = days_between(departure_date, arrival_date)
    return FlightTimes(
        departure_time=departure_time,
        arrival_time=arrival_time,
        departure_date=departure_date,
        arrival_date=arrival_date,
        duration=format_minutes_as_duration(duration_minutes),
        duration_minutes=duration_minutes,
        is_next_day=days_difference == 1,
        is_multi_day=days_difference > 1,
        days_difference=days_difference,
    )
