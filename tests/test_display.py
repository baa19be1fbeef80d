"""Tests for result rounding and rendering."""

import io
import math

import pytest
from rich.console import Console

from simplecalc.display import format_error, format_result, render_settings, round_result
from simplecalc.evaluator import evaluate
from simplecalc.models import ErrorKind, EvaluationError, Settings


# --- Concrete scenarios with default settings ---

@pytest.mark.parametrize("text, expected", [
    ("2 + 2", "4.00"),
    ("sqrt 9", "3.00"),
    ("2 ^ 3", "8.00"),
    ("5", "5.00"),
    ("1 / 3", "0.33"),
    ("-7 / 4", "-1.75"),
])
def test_default_scenarios(text, expected):
    s = Settings()
    result = evaluate(text, s)
    assert format_result(result.value, s.precision) == expected


# --- Rounding ---

def test_precision_zero_has_no_decimal_point():
    assert format_result(2.4, 0) == "2"


def test_fixed_fraction_digits():
    assert format_result(1.5, 4) == "1.5000"
    assert format_result(1234567.0, 1) == "1234567.0"


def test_round_half_to_even():
    assert format_result(0.5, 0) == "0"
    assert format_result(1.5, 0) == "2"
    assert format_result(2.5, 0) == "2"


def test_negative_zero_is_folded():
    assert format_result(-0.001, 2) == "0.00"
    assert math.copysign(1.0, round_result(-0.0001, 2)) == 1.0


def test_non_finite_values():
    assert format_result(math.inf, 2) == "inf"
    assert format_result(-math.inf, 2) == "-inf"
    assert format_result(math.nan, 2) == "nan"


def test_formatted_value_round_trips_within_half_unit():
    values = [0.0, 1.0 / 3.0, 2.0 / 3.0, -12.3456789, 98765.4321, 1e-9, 0.125]
    for precision in range(0, 7):
        for v in values:
            text = format_result(v, precision)
            assert abs(float(text) - v) <= 0.5 * 10 ** -precision + 1e-12


# --- Errors and tables ---

def test_format_error():
    err = EvaluationError(kind=ErrorKind.DIVISION_BY_ZERO, message="Attempted to divide by zero.")
    assert format_error(err) == "Error: Attempted to divide by zero."


def test_render_settings():
    buf = io.StringIO()
    console = Console(file=buf, width=100)
    render_settings(Settings(display_name="[bold]Eve", precision=3), console)
    text = buf.getvalue()
    assert "[bold]Eve" in text
    assert "3" in text
    assert "+, -, *, /, ^, sqrt" in text


def test_render_settings_with_no_operations():
    buf = io.StringIO()
    console = Console(file=buf, width=100)
    render_settings(Settings(allowed_operations=[]), console)
    assert "none" in buf.getvalue()
