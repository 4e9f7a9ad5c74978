"""Display formatting for deterministic explanations"""

from drive_decision.domain.models import Confidence, Verdict
from drive_decision.utils.math_utils import round_half_up


def format_currency(amount: float) -> str:
    """USD without cents, e.g. 42000.4 -> $42,000"""
    rounded = round_half_up(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"


def format_currency_with_cents(amount: float) -> str:
    """USD with cents, e.g. 653.567 -> $653.57"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_stress_label(score: float) -> str:
    if score >= 70:
        return "High financial stress"
    if score >= 40:
        return "Moderate financial stress"
    return "Low financial stress"


def format_confidence(confidence: Confidence) -> str:
    if confidence == "high":
        return "High confidence"
    if confidence == "medium":
        return "Moderate confidence"
    return "Low confidence"


def format_verdict(verdict: Verdict) -> str:
    return "Buying is the safer option" if verdict == "buy" else "Leasing is the safer option"


def format_months(months: int) -> str:
    """Readable duration, e.g. 6 -> 6 months, 24 -> 2 years, 30 -> 2y 6m"""
    if months < 12:
        return f"{months} months"

    years, remaining = divmod(months, 12)
    if remaining == 0:
        return f"{years} year{'s' if years > 1 else ''}"
    return f"{years}y {remaining}m"
