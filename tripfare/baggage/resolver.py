from dataclasses import replace

from .policies import BASIC, DEFAULT_TABLES, ECONOMY, PolicyTables
from ..models import BaggageAllowance, BaggageSummary

NOT_INCLUDED = 'Not included'
PERSONAL_ITEM_TEXT = '1 personal item (handbag, laptop)'


def resolve_allowance(
        airline: str | None,
        fare_tier: str | None = BASIC,
        cabin_class: str | None = ECONOMY,
        tables: PolicyTables | None = None,
) -> BaggageAllowance:
    """Baggage allowance for an airline / fare tier / cabin class.

    An airline override replaces the default entry field by field; 'cabin' and 'checked'
    are replaced as whole units. Without an override the default matrix is used, falling
    back to the tier's ECONOMY entry and finally to basic ECONOMY.
    """
    tables = tables or DEFAULT_TABLES
    fare = (fare_tier or BASIC).lower()
    cabin = (cabin_class or ECONOMY).upper()
    ultimate = tables.defaults[BASIC][ECONOMY]

    override = tables.overrides.get(airline or '', {}).get(fare, {}).get(cabin)
    if override is not None:
        base = tables.defaults.get(fare, {}).get(cabin) or ultimate
        return replace(base, **override)

    by_cabin = tables.defaults.get(fare) or tables.defaults[BASIC]
    return by_cabin.get(cabin) or by_cabin.get(ECONOMY) or ultimate


def is_low_cost_carrier(airline: str | None, tables: PolicyTables | None = None) -> bool:
    name = (airline or '').lower()
    return any(lcc.lower() in name for lcc in (tables or DEFAULT_TABLES).low_cost_carriers)


def format_baggage_info(allowance: BaggageAllowance) -> BaggageSummary:
    cabin = allowance.cabin
    checked = allowance.checked
    cabin_text = f'{cabin.pieces} {cabin.description} ({cabin.weight_kg} kg)' if cabin.pieces > 0 else NOT_INCLUDED
    if checked.included and checked.pieces > 0:
        noun = 'suitcases' if checked.pieces > 1 else 'suitcase'
        checked_text = f'{checked.pieces} {noun} of {checked.weight_kg} kg'
    else:
        checked_text = NOT_INCLUDED
    return BaggageSummary(
        cabin_text=cabin_text,
        checked_text=checked_text,
        personal_item_text=PERSONAL_ITEM_TEXT if allowance.personal_item else None,
    )
