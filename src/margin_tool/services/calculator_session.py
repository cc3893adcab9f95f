"""
Calculator Session - state and validation for the Default Margin Calculator screen.

Holds the labour and purchases grids, tracks the most recently entered field
in each, validates before deriving, and keeps one snapshot for Back.
Labour values are stored per hour; the day view only changes display and entry.
"""
import logging
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.calculator import derive, derivation_basis, has_enough_info
from ..engine.formatting import parse_input, round_for_display
from ..engine.models import (
    PricingRecord,
    CURRENCY_FIELDS,
    FIELDS,
    labour_defaults,
    purchases_defaults,
    validate_field_name,
)

logger = logging.getLogger(__name__)


MSG_LABOUR_COST_REQUIRED = "Labour Cost is required before calculating."
MSG_LABOUR_FIELD_REQUIRED = "Please enter at least one field other than Cost for Labour calculations."
MSG_PURCHASES_FIELD_REQUIRED = "Please enter at least one field for Purchases calculations."
MSG_ZERO_NOT_ALLOWED = "Zero values are not allowed. Please enter a positive number."
MSG_NEGATIVE_NOT_ALLOWED = "Negative values are not allowed. Please enter a positive number."
MSG_MARGIN_TOO_HIGH = "Margin must be less than 100%."
MSG_NON_FINITE = "Values are too large to calculate."

HINT_MESSAGE = "Complete one remaining field to calculate all values."


class ValidationError(Exception):
    """A user-facing validation failure that blocks derivation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CalculatorSession:
    """
    Labour + purchases calculator state.

    Typical flow:
        session.enter_labour('cost', '40')
        session.enter_labour('markup', '25')
        session.enter_purchases('margin', '20')
        labour, purchases = session.calculate()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.labour = labour_defaults()
        self.purchases = purchases_defaults(self.settings.purchase_cost)
        self.previous_labour: Optional[PricingRecord] = None
        self.previous_purchases: Optional[PricingRecord] = None
        self.is_day = False
        self.labour_cost_entered = False
        self.last_labour_field: Optional[str] = None
        self.last_purchases_field: Optional[str] = None
        self.validation_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def _fail(self, message: str, section: str = None):
        self.validation_error = message
        logger.info("Validation failed: %s", message, extra={"section": section})
        raise ValidationError(message)

    def _parse_entry(self, field: str, raw, section: str) -> float:
        validate_field_name(field)
        value = parse_input(field, raw, self.settings)
        if value == 0:
            self._fail(MSG_ZERO_NOT_ALLOWED, section)
        if value < 0:
            self._fail(MSG_NEGATIVE_NOT_ALLOWED, section)
        return value

    def enter_labour(self, field: str, raw) -> PricingRecord:
        """
        Record a labour field typed by the user.

        In day view, currency entries are converted back to per-hour values.
        """
        value = self._parse_entry(field, raw, 'labour')
        if self.is_day and field in CURRENCY_FIELDS:
            value = value / self.settings.hours_per_day

        self.labour = self.labour.replace(**{field: value})
        self.labour_cost_entered = self.labour.cost > 0
        self.last_labour_field = field
        self.validation_error = None
        logger.debug("Labour %s entered: %s", field, value, extra={"section": "labour", "field": field})
        return self.labour

    def enter_purchases(self, field: str, raw) -> PricingRecord:
        """Record a purchases field. Cost is pinned and entries for it are ignored."""
        validate_field_name(field)
        if field == 'cost':
            return self.purchases

        value = self._parse_entry(field, raw, 'purchases')
        self.purchases = self.purchases.replace(**{field: value}, cost=self.settings.purchase_cost)
        self.last_purchases_field = field
        self.validation_error = None
        logger.debug("Purchases %s entered: %s", field, value, extra={"section": "purchases", "field": field})
        return self.purchases

    def set_day_mode(self, is_day: bool):
        """Switch between the per-hour and per-day labour views."""
        self.is_day = bool(is_day)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def validate(self):
        """Raise ValidationError if the screen is not ready to calculate."""
        if not self.labour_cost_entered:
            self._fail(MSG_LABOUR_COST_REQUIRED, 'labour')

        if not self.last_labour_field or self.last_labour_field == 'cost':
            self._fail(MSG_LABOUR_FIELD_REQUIRED, 'labour')

        if not self.last_purchases_field:
            self._fail(MSG_PURCHASES_FIELD_REQUIRED, 'purchases')

        if (self.labour[self.last_labour_field] == 0
                or self.purchases[self.last_purchases_field] == 0):
            self._fail(MSG_ZERO_NOT_ALLOWED)

        if self.last_labour_field == 'margin' and self.labour.margin >= 100:
            self._fail(MSG_MARGIN_TOO_HIGH, 'labour')
        if self.last_purchases_field == 'margin' and self.purchases.margin >= 100:
            self._fail(MSG_MARGIN_TOO_HIGH, 'purchases')

        self.validation_error = None

    def calculate(self) -> tuple[PricingRecord, PricingRecord]:
        """
        Validate, snapshot for Back, and derive both grids.

        Only cost and the most recently entered field feed each derivation.

        Returns:
            (labour, purchases) derived records
        """
        self.validate()

        self.previous_labour = self.labour
        self.previous_purchases = self.purchases

        purchases_input = self.purchases.replace(cost=self.settings.purchase_cost)
        self.labour = derive(self.labour, known_field=self.last_labour_field)
        self.purchases = derive(purchases_input, known_field=self.last_purchases_field)

        logger.debug(
            "Calculated labour from %s, purchases from %s",
            self.last_labour_field, self.last_purchases_field,
        )
        return self.labour, self.purchases

    def clear(self):
        """Reset both grids to defaults; the current values become the Back snapshot."""
        self.previous_labour = self.labour
        self.previous_purchases = self.purchases
        self.labour = labour_defaults()
        self.purchases = purchases_defaults(self.settings.purchase_cost)
        self.labour_cost_entered = False
        self.last_labour_field = None
        self.last_purchases_field = None
        self.validation_error = None
        logger.debug("Calculator cleared")

    @property
    def can_go_back(self) -> bool:
        return self.previous_labour is not None or self.previous_purchases is not None

    def back(self):
        """Restore the snapshot taken by the last calculate() or clear()."""
        if self.previous_labour is not None:
            self.labour = self.previous_labour
            self.labour_cost_entered = self.previous_labour.cost > 0
            self.last_labour_field = 'cost' if self.previous_labour.cost > 0 else None
        if self.previous_purchases is not None:
            self.purchases = self.previous_purchases
            self.last_purchases_field = None
        self.previous_labour = None
        self.previous_purchases = None
        self.validation_error = None
        logger.debug("Restored previous values")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def hint(self) -> Optional[str]:
        """Banner text while either grid still lacks a field besides cost."""
        if has_enough_info(self.labour) and has_enough_info(self.purchases):
            return None
        return HINT_MESSAGE

    def display_labour(self) -> PricingRecord:
        """Labour record as shown in the current hour/day view."""
        if not self.is_day:
            return self.labour
        hours = self.settings.hours_per_day
        return self.labour.replace(**{name: self.labour[name] * hours for name in CURRENCY_FIELDS})

    def labour_title(self) -> str:
        return "Labour (Day)" if self.is_day else "Labour/hr"

    def user_entered_fields(self, section: str) -> set[str]:
        """Fields to highlight as typed by the user."""
        fields = set()
        if section == 'labour':
            if self.labour_cost_entered:
                fields.add('cost')
            if self.last_labour_field and self.last_labour_field != 'cost':
                fields.add(self.last_labour_field)
        elif section == 'purchases':
            if self.last_purchases_field:
                fields.add(self.last_purchases_field)
        else:
            raise ValueError(f"Unknown section: {section!r}")
        return fields

    def results_frame(self) -> pd.DataFrame:
        """Both grids rounded for display, one row per section."""
        rows = []
        for section, record, basis_field in (
            (self.labour_title(), self.display_labour(), self.last_labour_field),
            ("Purchases", self.purchases, self.last_purchases_field),
        ):
            rounded = round_for_display(record, self.settings)
            row = {'Section': section}
            row.update({name.capitalize(): rounded[name] for name in FIELDS})
            row['Basis'] = derivation_basis(record, basis_field) or ""
            rows.append(row)
        return pd.DataFrame(rows, columns=['Section', 'Cost', 'Markup', 'Profit', 'Charge', 'Margin', 'Basis'])
