"""
Display helpers: parse raw form input and round/format pricing fields.

Percent fields (markup, margin) use 1 decimal place, currency fields 2,
unless overridden through settings.
"""
import math
from typing import Optional

from ..config.settings import get_settings, Settings
from .models import PricingRecord, PERCENT_FIELDS, FIELDS


def decimals_for(field: str, settings: Optional[Settings] = None) -> int:
    """Number of display decimals for a field."""
    settings = settings or get_settings()
    if field in PERCENT_FIELDS:
        return settings.percent_decimals
    return settings.currency_decimals


def parse_input(field: str, raw, settings: Optional[Settings] = None) -> float:
    """
    Parse a raw form value and round it to the field's display precision.

    Blank or unparsable input yields 0.0, which callers treat as "not entered".
    """
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip().replace(',', '').lstrip('$').rstrip('%')
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return round(value, decimals_for(field, settings))


def round_for_display(record: PricingRecord, settings: Optional[Settings] = None) -> PricingRecord:
    """Round each field to display precision; non-finite values are kept as-is."""
    settings = settings or get_settings()
    values = {}
    for name in FIELDS:
        value = record[name]
        values[name] = round(value, decimals_for(name, settings)) if math.isfinite(value) else value
    return PricingRecord(**values)


def format_value(field: str, value: float, settings: Optional[Settings] = None) -> str:
    """Format a field for display, e.g. 33.3 for percent, 150.00 for currency."""
    if not math.isfinite(value):
        return "∞" if value > 0 else ("-∞" if value < 0 else "n/a")
    return f"{value:.{decimals_for(field, settings)}f}"
