"""Unit tests for numeric primitives"""

import math
import pytest
from drive_decision.domain.exceptions import InvalidArgumentError
from drive_decision.utils.math_utils import (
    clamp,
    estimate_lease_payment,
    monthly_payment_from_loan,
    round_half_up,
)


def test_clamp_bounds():
    assert clamp(-5, 0, 100) == 0
    assert clamp(150, 0, 100) == 100
    assert clamp(42.5, 0, 100) == 42.5


def test_monthly_payment_standard_amortization():
    """$20,000 at 6% over 60 months"""
    assert monthly_payment_from_loan(20000, 6, 60) == pytest.approx(386.66, abs=0.01)


def test_monthly_payment_zero_apr_is_straight_line():
    assert monthly_payment_from_loan(12000, 0, 48) == 12000 / 48


def test_monthly_payment_no_principal():
    assert monthly_payment_from_loan(0, 9.9, 60) == 0
    assert monthly_payment_from_loan(-500, 5, 60) == 0


@pytest.mark.parametrize("term", [0, -12])
def test_monthly_payment_rejects_non_positive_term(term):
    with pytest.raises(InvalidArgumentError, match="term_months"):
        monthly_payment_from_loan(20000, 6, term)


@pytest.mark.parametrize(
    "principal, apr, term, field",
    [
        (math.nan, 6, 60, "principal"),
        (20000, math.inf, 60, "apr_percent"),
        (20000, 6, math.nan, "term_months"),
    ],
)
def test_monthly_payment_rejects_non_finite(principal, apr, term, field):
    with pytest.raises(InvalidArgumentError) as exc_info:
        monthly_payment_from_loan(principal, apr, term)
    assert exc_info.value.field == field


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(26.25) == 26
    assert round_half_up(-0.4) == 0


def test_estimate_lease_payment():
    """Depreciation to a 55% residual plus money factor 0.00125"""
    # (40000 - 22000) / 36 + (40000 + 22000) * 0.00125 = 500 + 77.5
    assert estimate_lease_payment(40000, 36) == pytest.approx(577.5)
