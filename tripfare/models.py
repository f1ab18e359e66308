from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ParsedTimestamp:
    """Single itinerary timestamp split for display.

    date is an ISO calendar date (YYYY-MM-DD), time a 24h clock time (HH:MM);
    instant keeps the full aware datetime (UTC) for arithmetic.
    """
    date: str
    time: str
    instant: datetime


@dataclass(frozen=True, slots=True)
class FlightTimes:
    """Reconciled, internally consistent times of a single flight leg."""
    departure_time: str
    arrival_time: str
    departure_date: str
    arrival_date: str
    duration: str
    duration_minutes: int
    is_next_day: bool
    is_multi_day: bool
    days_difference: int

    def as_payload(self) -> dict[str, Any]:
        return {
            'departureTime': self.departure_time,
            'arrivalTime': self.arrival_time,
            'departureDate': self.departure_date,
            'arrivalDate': self.arrival_date,
            'duration': self.duration,
            'durationMinutes': self.duration_minutes,
            'isNextDay': self.is_next_day,
            'isMultiDay': self.is_multi_day,
            'daysDifference': self.days_difference,
        }


@dataclass(frozen=True, slots=True)
class CabinAllowance:
    pieces: int
    weight_kg: int
    description: str


@dataclass(frozen=True, slots=True)
class CheckedAllowance:
    pieces: int
    weight_kg: int
    included: bool


@dataclass(frozen=True, slots=True)
class BaggageAllowance:
    """Baggage entitlement for one (airline, fare tier, cabin class) combination.

    additional_bag_price is expressed in EUR; None when the fare does not sell extra bags.
    """
    cabin: CabinAllowance
    checked: CheckedAllowance
    personal_item: bool
    additional_bag_price: int | None = None

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            'cabin': {
                'pieces': self.cabin.pieces,
                'weightKg': self.cabin.weight_kg,
                'description': self.cabin.description,
            },
            'checked': {
                'pieces': self.checked.pieces,
                'weightKg': self.checked.weight_kg,
                'included': self.checked.included,
            },
            'personalItem': self.personal_item,
        }
        if self.additional_bag_price is not None:
            payload['additionalBagPrice'] = self.additional_bag_price
        return payload


@dataclass(frozen=True, slots=True)
class BaggageSummary:
    cabin_text: str
    checked_text: str
    personal_item_text: str | None


@dataclass(slots=True)
class FlightOffer:
    """Raw flight offer as delivered by an upstream search provider.

    Every time-related field may be missing or malformed; departure_date is the
    search date used when the departure timestamp itself is unusable.
    """
    airline: str
    departure_date: str
    departure: str | None = None
    arrival: str | None = None
    duration: str | None = None
    fare_tier: str = 'basic'
    cabin_class: str = 'ECONOMY'
    flight_number: str | None = None


@dataclass(frozen=True, slots=True)
class OfferReport:
    offer: FlightOffer
    times: FlightTimes
    allowance: BaggageAllowance
    baggage: BaggageSummary
    low_cost: bool

    def as_payload(self) -> dict[str, Any]:
        return {
            'airline': self.offer.airline,
            'flightNumber': self.offer.flight_number,
            'fareTier': self.offer.fare_tier,
            'cabinClass': self.offer.cabin_class,
            'times': self.times.as_payload(),
            'baggage': self.allowance.as_payload(),
            'baggageText': {
                'cabin': self.baggage.cabin_text,
                'checked': self.baggage.checked_text,
                'personalItem': self.baggage.personal_item_text,
            },
            'lowCostCarrier': self.low_cost,
        }
