import math

import pytest

from margin_tool.config.settings import Settings
from margin_tool.engine import PricingRecord
from margin_tool.engine.formatting import parse_input, round_for_display, format_value, decimals_for


@pytest.fixture
def settings(tmp_path):
    return Settings(project_root=tmp_path)


def test_decimals(settings):
    assert decimals_for('markup', settings) == 1
    assert decimals_for('margin', settings) == 1
    assert decimals_for('charge', settings) == 2


@pytest.mark.parametrize("field,raw,expected", [
    ('cost', '12.5', 12.5),
    ('cost', ' $1,250.00 ', 1250.0),
    ('margin', '33.33', 33.3),
    ('markup', '12.5%', 12.5),
    ('profit', 7, 7.0),
    ('charge', '', 0.0),
    ('charge', None, 0.0),
    ('charge', 'n/a', 0.0),
    ('charge', 'inf', 0.0),
])
def test_parse_input(settings, field, raw, expected):
    assert parse_input(field, raw, settings) == pytest.approx(expected)


def test_round_for_display(settings):
    rounded = round_for_display(PricingRecord(cost=100, markup=50, profit=50, charge=150, margin=100 / 3), settings)
    assert rounded.margin == 33.3
    assert rounded.charge == 150.0


def test_round_keeps_infinity(settings):
    rounded = round_for_display(PricingRecord(cost=1, charge=math.inf), settings)
    assert math.isinf(rounded.charge)


def test_format_value(settings):
    assert format_value('cost', 1, settings) == "1.00"
    assert format_value('margin', 100 / 3, settings) == "33.3"
    assert format_value('charge', math.inf, settings) == "∞"
    assert format_value('charge', math.nan, settings) == "n/a"
