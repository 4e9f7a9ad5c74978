"""Numeric allowlist - reject narrative text that cites numbers the engine never produced"""

import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Set, Tuple

from drive_decision.domain.models import DecisionResult
from drive_decision.utils.math_utils import round_half_up

# "$1,234", "25%", "72", "-0.25" -> the signed digits, commas and decimals
NUMERIC_TOKEN_PATTERN = re.compile(r"[-+]?\d[\d,]*(?:\.\d+)?")

CONTEXT_NUMBER_KEYS = (
    "ownership_months",
    "lease_term_months",
    "mileage_allowance_per_year",
    "est_miles_per_year",
)

ALLOWLIST_VIOLATION_REASON = "Narrative contained numbers not present in allowlist"


@dataclass(frozen=True)
class AllowlistResult:
    """Outcome of an allowlist check; a failure lists each offending token once"""

    ok: bool
    reason: Optional[str] = None
    offending: Tuple[str, ...] = ()


def _raw_string(n: float) -> str:
    # 386.0 renders as "386", 386.5 as "386.5"
    if float(n).is_integer():
        return str(int(n))
    return repr(float(n))


def extract_numeric_tokens(text: str) -> List[str]:
    return NUMERIC_TOKEN_PATTERN.findall(text)


def normalize_numeric_token(token: str) -> str:
    return token.replace(",", "")


def build_allowlist_numbers(
    result: DecisionResult,
    context: Optional[Mapping[str, Any]] = None,
) -> Set[str]:
    """
    Every acceptable rendering of the numbers a narrative may cite.

    Each finite number contributes its raw form, nearest integer, and
    two- and zero-decimal fixed forms.
    """
    numbers = [
        result.buy_total_cost,
        result.lease_total_cost,
        result.buy_monthly_all_in,
        result.lease_monthly_all_in,
        result.buy_stress_score,
        result.lease_stress_score,
    ]

    context = context or {}
    for key in CONTEXT_NUMBER_KEYS:
        value = context.get(key)
        if value is not None:
            numbers.append(value)

    allow: Set[str] = set()
    for n in numbers:
        if isinstance(n, bool) or not isinstance(n, (int, float)) or not math.isfinite(n):
            continue
        allow.add(_raw_string(n))
        allow.add(str(round_half_up(n)))
        allow.add(f"{n:.2f}")
        allow.add(f"{n:.0f}")

    return allow


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_as_text(item) for item in value)
    return str(value)


def _narrative_text(narrative: Mapping[str, Any]) -> str:
    # Any value type is tolerated; numbers hidden in non-string parts still count
    if not isinstance(narrative, Mapping):
        return _as_text(narrative)
    return " ".join(
        _as_text(narrative.get(key)) for key in ("headline", "explanation", "bullets", "cautions")
    )


def passes_number_allowlist(
    narrative: Mapping[str, Any],
    result: DecisionResult,
    context: Optional[Mapping[str, Any]] = None,
) -> AllowlistResult:
    """
    Check every numeric token in a narrative against the allowlist.

    Never raises; callers treat a failed result as "fall back to the
    deterministic explanation".
    """
    allow = build_allowlist_numbers(result, context)
    tokens = [normalize_numeric_token(t) for t in extract_numeric_tokens(_narrative_text(narrative))]

    if not tokens:
        return AllowlistResult(ok=True)

    offending = [t for t in tokens if t not in allow]
    if offending:
        return AllowlistResult(
            ok=False,
            reason=ALLOWLIST_VIOLATION_REASON,
            offending=tuple(dict.fromkeys(offending)),
        )

    return AllowlistResult(ok=True)
