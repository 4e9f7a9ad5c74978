"""Numeric primitives shared by the scoring and decision modules"""

import math

from drive_decision.domain.exceptions import InvalidArgumentError

# Largest integer a JSON client can represent exactly (2^53 - 1)
MAX_SAFE_MONEY = float(2**53 - 1)


def clamp(n: float, lo: float, hi: float) -> float:
    """Bound n to [lo, hi]"""
    return max(lo, min(hi, n))


def assert_finite(name: str, value: float) -> None:
    """Raise InvalidArgumentError unless value is a finite real number"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidArgumentError(name, "must be a finite number")


def round_half_up(n: float) -> int:
    """Round to nearest integer with halves going up (matches client-side rounding)"""
    return math.floor(n + 0.5)


def monthly_payment_from_loan(principal: float, apr_percent: float, term_months: float) -> float:
    """
    Standard amortized loan payment.

    - principal <= 0 means no loan is needed and the payment is 0
    - a 0% rate falls back to straight-line principal / term
    - otherwise P * r * (1+r)^n / ((1+r)^n - 1) with r = APR / 12
    """
    assert_finite("principal", principal)
    assert_finite("apr_percent", apr_percent)
    assert_finite("term_months", term_months)

    if term_months <= 0:
        raise InvalidArgumentError("term_months", "must be > 0")
    if principal <= 0:
        return 0.0

    r = (apr_percent / 100) / 12
    if r == 0:
        return principal / term_months

    growth = (1 + r) ** term_months
    return principal * (r * growth) / (growth - 1)


def estimate_lease_payment(
    msrp: float,
    term_months: int,
    residual_percent: float = 0.55,
    money_factor: float = 0.00125,
) -> float:
    """
    Rough lease payment: depreciation over the term plus the money-factor charge.

    Used only for what-if repricing when the buyer has no dealer quote.
    """
    assert_finite("msrp", msrp)
    if term_months <= 0:
        raise InvalidArgumentError("term_months", "must be > 0")

    residual_value = msrp * residual_percent
    depreciation = (msrp - residual_value) / term_months
    finance_charge = (msrp + residual_value) * money_factor
    return depreciation + finance_charge
