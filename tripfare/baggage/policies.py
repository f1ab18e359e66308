"""Baggage reference tables: default policy matrix, airline overrides and low-cost carriers.

Tables are declared as plain dicts (the same shape a JSON policy file uses), converted into
dataclasses with dacite and frozen behind MappingProxyType so nothing can mutate them at runtime.

Override entries stay partial: each maps a subset of BaggageAllowance field names to values,
with nested 'cabin' / 'checked' entries converted to their dataclasses as whole units.
"""
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeAlias

import dacite

from ..errors import PolicyFileError
from ..models import BaggageAllowance, CabinAllowance, CheckedAllowance

PolicyMatrix: TypeAlias = Mapping[str, Mapping[str, BaggageAllowance]]
PartialAllowance: TypeAlias = Mapping[str, Any]
OverrideTable: TypeAlias = Mapping[str, Mapping[str, Mapping[str, PartialAllowance]]]

BASIC = 'basic'
ECONOMY = 'ECONOMY'

_DACITE_CONFIG = dacite.Config(strict=True)
_ALLOWANCE_FIELDS = {f.name for f in fields(BaggageAllowance)}
_NESTED_TYPES: dict[str, type] = {'cabin': CabinAllowance, 'checked': CheckedAllowance}

_DEFAULT_POLICIES: dict[str, dict[str, dict[str, Any]]] = {
    'basic': {
        'ECONOMY': {
            'cabin': {'pieces': 1, 'weight_kg': 8, 'description': 'Cabin bag'},
            'checked': {'pieces': 0, 'weight_kg': 0, 'included': False},
            'personal_item': True,
            'additional_bag_price': 25,
        },
        'PREMIUM_ECONOMY': {
            'cabin': {'pieces': 1, 'weight_kg': 10, 'description': 'Cabin bag'},
            'checked': {'pieces': 1, 'weight_kg': 23, 'included': True},
            'personal_item': True,
            'additional_bag_price': 30,
        },
        'BUSINESS': {
            'cabin': {'pieces': 2, 'weight_kg': 12, 'description': 'Cabin bags'},
            'checked': {'pieces': 2, 'weight_kg': 32, 'included': True},
            'personal_item': True,
            'additional_bag_price': 50,
        },
        'FIRST': {
            'cabin': {'pieces': 2, 'weight_kg': 14, 'description': 'Cabin bags'},
            'checked': {'pieces': 3, 'weight_kg': 32, 'included': True},
            'personal_item': True,
            'additional_bag_price': 75,
        },
    },
    'benefits': {
        'ECONOMY': {
            'cabin': {'pieces': 1, 'weight_kg': 10, 'description': 'Cabin bag'},
            'checked': {'pieces': 1, 'weight_kg': 23, 'included': True},
            'personal_item': True,
            'additional_bag_price': 20,
        },
        'PREMIUM_ECONOMY': {
            'cabin': {'pieces': 1, 'weight_kg': 12, 'description': 'Cabin bag'},
            'checked': {'pieces': 2, 'weight_kg': 23, 'included': True},
            'personal_item': True,
            'additional_bag_price': 25,
        },
        'BUSINESS': {
            'cabin': {'pieces': 2, 'weight_kg': 14, 'description': 'Cabin bags'},
            'checked': {'pieces': 2, 'weight_kg': 32, 'included': True},
            'personal_item': True,
            'additional_bag_price': 40,
        },
        'FIRST': {
            'cabin': {'pieces': 2, 'weight_kg': 18, 'description': 'Cabin bags'},
            'checked': {'pieces': 3, 'weight_kg': 32, 'included': True},
            'personal_item': True,
            'additional_bag_price': 60,
        },
    },
}


def _economy(cabin_kg: int, checked_pieces: int, checked_kg: int, extra_bag: int,
             personal_item: bool = True, description: str = 'Cabin bag') -> dict[str, Any]:
    return {
        'cabin': {'pieces': 1, 'weight_kg': cabin_kg, 'description': description},
        'checked': {'pieces': checked_pieces, 'weight_kg': checked_kg, 'included': checked_pieces > 0},
        'personal_item': personal_item,
        'additional_bag_price': extra_bag,
    }


_AIRLINE_OVERRIDES: dict[str, dict[str, dict[str, dict[str, Any]]]] = {
    # low-cost carriers: no checked bag, no personal item on top of the cabin bag
    'Fly540': {'basic': {'ECONOMY': _economy(7, 0, 0, 20, personal_item=False)}},
    'Ryanair': {'basic': {'ECONOMY': _economy(10, 0, 0, 15, personal_item=False, description='Small bag')}},
    'EasyJet': {'basic': {'ECONOMY': _economy(15, 0, 0, 18, personal_item=False)}},
    # full-service carriers
    'Air France': {
        'basic': {'ECONOMY': _economy(12, 1, 23, 70)},
        'benefits': {'ECONOMY': _economy(12, 2, 23, 60)},
    },
    'Emirates': {
        'basic': {
            'ECONOMY': _economy(7, 1, 30, 100),
            'BUSINESS': {
                'cabin': {'pieces': 2, 'weight_kg': 14, 'description': 'Cabin bags'},
                'checked': {'pieces': 2, 'weight_kg': 40, 'included': True},
                'personal_item': True,
                'additional_bag_price': 150,
            },
        },
    },
    'Ethiopian Airlines': {'basic': {'ECONOMY': _economy(7, 2, 23, 50)}},
    'Turkish Airlines': {'basic': {'ECONOMY': _economy(8, 1, 23, 60)}},
    'Kenya Airways': {'basic': {'ECONOMY': _economy(12, 1, 23, 45)}},
    'Royal Air Maroc': {'basic': {'ECONOMY': _economy(10, 1, 23, 55)}},
    'Brussels Airlines': {'basic': {'ECONOMY': _economy(8, 1, 23, 65)}},
}

_LOW_COST_CARRIERS = (
    'Ryanair', 'EasyJet', 'Vueling', 'Transavia', 'Fly540',
    'Spirit', 'Frontier', 'Wizz Air', 'Norwegian', 'Pegasus',
)


@dataclass(frozen=True, slots=True)
class PolicyTables:
    """Read-only snapshot of every table the resolver consults."""
    defaults: PolicyMatrix
    overrides: OverrideTable
    low_cost_carriers: tuple[str, ...]


def _check_allowance(allowance: BaggageAllowance, where: str) -> BaggageAllowance:
    if not allowance.checked.included and allowance.checked.pieces != 0:
        raise PolicyFileError(f'{where}: checked bags not included but pieces={allowance.checked.pieces}')
    return allowance


def _parse_allowance(data: Any, where: str) -> BaggageAllowance:
    try:
        allowance = dacite.from_dict(data_class=BaggageAllowance, data=data, config=_DACITE_CONFIG)
    except dacite.DaciteError as e:
        raise PolicyFileError(f'{where}: {e}') from e
    return _check_allowance(allowance, where)


def _parse_partial(data: Any, where: str) -> PartialAllowance:
    if not isinstance(data, Mapping):
        raise PolicyFileError(f'{where}: override must be an object, got {type(data).__name__}')
    unknown = set(data) - _ALLOWANCE_FIELDS
    if unknown:
        raise PolicyFileError(f'{where}: unknown fields {sorted(unknown)}')
    partial: dict[str, Any] = {}
    for name, value in data.items():
        if name in _NESTED_TYPES:
            try:
                value = dacite.from_dict(data_class=_NESTED_TYPES[name], data=value, config=_DACITE_CONFIG)
            except dacite.DaciteError as e:
                raise PolicyFileError(f'{where}.{name}: {e}') from e
        partial[name] = value
    checked = partial.get('checked')
    if checked is not None and not checked.included and checked.pieces != 0:
        raise PolicyFileError(f'{where}: checked bags not included but pieces={checked.pieces}')
    return MappingProxyType(partial)


def _parse_defaults(raw: Mapping[str, Any]) -> PolicyMatrix:
    matrix = {}
    for fare_tier, by_cabin in raw.items():
        matrix[fare_tier.lower()] = MappingProxyType({
            cabin_class.upper(): _parse_allowance(data, f'defaults.{fare_tier}.{cabin_class}')
            for cabin_class, data in by_cabin.items()
        })
    if ECONOMY not in matrix.get(BASIC, {}):
        raise PolicyFileError(f'defaults must define {BASIC}.{ECONOMY}')
    return MappingProxyType(matrix)


def _parse_overrides(raw: Mapping[str, Any]) -> OverrideTable:
    table = {}
    for airline, by_fare in raw.items():
        table[airline] = MappingProxyType({
            fare_tier.lower(): MappingProxyType({
                cabin_class.upper(): _parse_partial(data, f'overrides.{airline}.{fare_tier}.{cabin_class}')
                for cabin_class, data in by_cabin.items()
            })
            for fare_tier, by_cabin in by_fare.items()
        })
    return MappingProxyType(table)


def build_policy_tables(
        defaults: Mapping[str, Any],
        overrides: Mapping[str, Any] | None = None,
        low_cost_carriers: tuple[str, ...] | list[str] = _LOW_COST_CARRIERS,
) -> PolicyTables:
    try:
        return PolicyTables(
            defaults=_parse_defaults(defaults),
            overrides=_parse_overrides(overrides or {}),
            low_cost_carriers=tuple(low_cost_carriers),
        )
    except (AttributeError, TypeError) as e:
        raise PolicyFileError(f'Malformed policy tables: {e}') from e


def load_policy_tables(path: Path) -> PolicyTables:
    """Load tables from a JSON file with 'defaults', 'overrides' and optional 'low_cost_carriers'."""
    try:
        with open(path, 'rt', encoding='utf-8') as f:
            loaded = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PolicyFileError(f'Cannot read policy file {path}: {e}') from e
    if not isinstance(loaded, dict) or 'defaults' not in loaded:
        raise PolicyFileError(f'Policy file {path} has no "defaults" section')
    tables = build_policy_tables(
        loaded['defaults'],
        loaded.get('overrides'),
        loaded.get('low_cost_carriers', _LOW_COST_CARRIERS),
    )
    logging.info('Loaded baggage policies from %s (%d airline overrides)', path, len(tables.overrides))
    return tables


DEFAULT_TABLES = build_policy_tables(_DEFAULT_POLICIES, _AIRLINE_OVERRIDES)
