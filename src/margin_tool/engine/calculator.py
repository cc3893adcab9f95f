"""
Margin Calculator Engine - derives the full pricing record from cost plus one field.

Resolution order (first populated field wins, only when cost > 0):
1. markup  -> profit, charge, margin
2. profit  -> charge, markup, margin
3. charge  -> profit, markup, margin
4. margin  -> charge, profit, markup

Cost is always the anchor and is never derived. The engine is pure: no state,
no I/O, no validation. Callers validate and round for display.
"""
import math
from typing import Optional

from .models import PricingRecord, SECONDARY_FIELDS, validate_field_name


def _isolate(record: PricingRecord, known_field: Optional[str]) -> PricingRecord:
    """Zero every secondary field except the known one."""
    if known_field is None:
        return record
    validate_field_name(known_field)
    if known_field == 'cost':
        return record
    return record.replace(**{
        name: 0.0 for name in SECONDARY_FIELDS if name != known_field
    })


def derivation_basis(record: PricingRecord, known_field: Optional[str] = None) -> Optional[str]:
    """
    Return the secondary field that derive() would honour.

    Returns None when derivation passes the record through unchanged
    (cost not positive, or no secondary field populated).
    """
    record = _isolate(record, known_field)
    if record.cost <= 0:
        return None
    for name in SECONDARY_FIELDS:
        if record[name] > 0:
            return name
    return None


def has_enough_info(record: PricingRecord) -> bool:
    """True when at least one field besides cost is populated."""
    return any(record[name] > 0 for name in SECONDARY_FIELDS)


def _charge_from_margin(cost: float, margin: float) -> float:
    divisor = 1 - margin / 100
    if divisor == 0:
        # 100% margin has no finite selling price
        return math.copysign(math.inf, cost)
    return cost / divisor


def derive(record: PricingRecord, known_field: Optional[str] = None) -> PricingRecord:
    """
    Fill in the remaining pricing fields.

    Args:
        record: Partially populated pricing record
        known_field: Optional field the caller treats as the input. Competing
            secondary fields are zeroed first so only this one is honoured.

    Returns:
        New PricingRecord; the input is never mutated.
    """
    record = _isolate(record, known_field)

    cost = record.cost
    markup = record.markup
    profit = record.profit
    charge = record.charge
    margin = record.margin

    if cost > 0:
        if record.markup > 0:
            profit = cost * (record.markup / 100)
            charge = cost + profit
            margin = (profit / charge) * 100
        elif record.profit > 0:
            charge = cost + record.profit
            markup = (record.profit / cost) * 100
            margin = (record.profit / charge) * 100
        elif record.charge > 0:
            profit = record.charge - cost
            markup = (profit / cost) * 100
            margin = (profit / record.charge) * 100
        elif record.margin > 0:
            charge = _charge_from_margin(cost, record.margin)
            profit = charge - cost
            markup = (profit / cost) * 100

    return PricingRecord(
        cost=cost,
        markup=markup,
        profit=profit,
        charge=charge,
        margin=margin,
    )
