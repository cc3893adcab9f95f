"""
Data models for the margin calculator.

Uses dataclasses for structured, type-safe data representation.
"""
import math
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from typing import Optional


FIELDS = ('cost', 'markup', 'profit', 'charge', 'margin')

# Derivation priority: first populated field wins
SECONDARY_FIELDS = ('markup', 'profit', 'charge', 'margin')

PERCENT_FIELDS = ('markup', 'margin')
CURRENCY_FIELDS = ('cost', 'profit', 'charge')

FIELD_LABELS = {
    'cost': 'cost',
    'markup': 'm-u%',
    'profit': 'profit',
    'charge': 'charge',
    'margin': 'margin%',
}


@dataclass
class PricingRecord:
    """
    The five mutually-consistent pricing fields of an item.

    Currency fields: cost, profit, charge.
    Percent fields: markup (of cost), margin (of charge).
    """
    cost: float = 0.0
    markup: float = 0.0
    profit: float = 0.0
    charge: float = 0.0
    margin: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'PricingRecord':
        """Build a record from a partial mapping; missing fields default to 0."""
        data = data or {}
        return cls(**{name: float(data.get(name) or 0.0) for name in FIELDS})

    def to_dict(self) -> dict:
        return asdict(self)

    def replace(self, **changes) -> 'PricingRecord':
        """Return a copy with the given fields changed."""
        return dc_replace(self, **changes)

    def is_finite(self) -> bool:
        """False when any field is inf or NaN (e.g. margin of exactly 100%)."""
        return all(math.isfinite(getattr(self, f.name)) for f in fields(self))

    def __getitem__(self, name: str) -> float:
        if name not in FIELDS:
            raise KeyError(name)
        return getattr(self, name)


def labour_defaults() -> PricingRecord:
    """All-zero record for the labour grid."""
    return PricingRecord()


def purchases_defaults(purchase_cost: float = 1.0) -> PricingRecord:
    """Purchases record with cost pinned to one unit."""
    return PricingRecord(cost=purchase_cost)


def validate_field_name(name: str) -> str:
    """Raise ValueError for anything that is not a pricing field."""
    if name not in FIELDS:
        raise ValueError(f"Unknown pricing field: {name!r}. Expected one of {', '.join(FIELDS)}")
    return name
