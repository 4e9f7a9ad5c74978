"""Explanation narratives - response contract, explain payload and the deterministic template"""

from dataclasses import asdict
from typing import Any, Dict, List, Literal, Mapping, Optional

from drive_decision.domain.models import BuyScenario, DecisionResult, LeaseScenario, RiskTolerance
from drive_decision.utils.formatters import (
    format_confidence,
    format_currency,
    format_currency_with_cents,
    format_months,
    format_stress_label,
    format_verdict,
)
from drive_decision.utils.math_utils import round_half_up

Verbosity = Literal["short", "detailed"]

NARRATIVE_KEYS = frozenset({"headline", "explanation", "bullets", "cautions"})


def _is_string_list(value: Any, min_len: int, max_len: int) -> bool:
    return (
        isinstance(value, list)
        and min_len <= len(value) <= max_len
        and all(isinstance(item, str) for item in value)
    )


def validate_explain_response_shape(value: Any) -> bool:
    """
    Narrative contract:
    - headline: str
    - explanation: str
    - bullets: 3-5 strings
    - cautions: 1-3 strings
    No other keys.
    """
    if not isinstance(value, dict):
        return False
    if set(value.keys()) != NARRATIVE_KEYS:
        return False
    if not isinstance(value["headline"], str) or not isinstance(value["explanation"], str):
        return False
    return _is_string_list(value["bullets"], 3, 5) and _is_string_list(value["cautions"], 1, 3)


def build_explain_payload(
    result: DecisionResult,
    buy: Optional[BuyScenario] = None,
    lease: Optional[LeaseScenario] = None,
    risk_tolerance: Optional[RiskTolerance] = None,
) -> Dict[str, Any]:
    """Decision result plus the scenario context a narrator may cite"""
    context = {
        "ownership_months": buy.ownership_months if buy else None,
        "lease_term_months": lease.term_months if lease else None,
        "risk_tolerance": risk_tolerance,
        "mileage_allowance_per_year": lease.mileage_allowance_per_year if lease else None,
        "est_miles_per_year": lease.est_miles_per_year if lease else None,
    }

    payload = asdict(result)
    payload["risk_flags"] = list(result.risk_flags)
    payload["context"] = {key: value for key, value in context.items() if value is not None}
    return payload


def _cost_bullet(result: DecisionResult) -> str:
    if result.buy_total_cost < result.lease_total_cost:
        return "Buying has the lower total cost over this horizon."
    if result.lease_total_cost < result.buy_total_cost:
        return "Leasing has the lower total cost over this horizon."
    return "Both options cost the same in total over this horizon."


def build_deterministic_explanation(
    result: DecisionResult,
    context: Optional[Mapping[str, Any]] = None,
    verbosity: Verbosity = "short",
) -> Dict[str, Any]:
    """
    Template explanation built only from the result and its context.

    The short form cites numbers exactly as the allowlist renders them, so
    it is always safe to show. The detailed form adds the engine summary,
    cent-level monthly costs, readable durations and the risk flags.
    """
    context = context or {}
    ownership_months = context.get("ownership_months")
    lease_term_months = context.get("lease_term_months")

    horizon = f"Over {ownership_months} months" if ownership_months else "Over your ownership horizon"
    explanation = (
        f"{horizon}, buying costs about {format_currency(result.buy_total_cost)} in total "
        f"({format_currency(result.buy_monthly_all_in)} per month all-in) and leasing costs about "
        f"{format_currency(result.lease_total_cost)} "
        f"({format_currency(result.lease_monthly_all_in)} per month all-in). "
        f"{format_confidence(result.confidence)} in this recommendation."
    )

    bullets: List[str] = [
        f"Buy stress score: {round_half_up(result.buy_stress_score)} "
        f"({format_stress_label(result.buy_stress_score)}).",
        f"Lease stress score: {round_half_up(result.lease_stress_score)} "
        f"({format_stress_label(result.lease_stress_score)}).",
        _cost_bullet(result),
    ]
    if ownership_months and lease_term_months:
        bullets.append(
            f"The lease runs {lease_term_months} months against a {ownership_months}-month ownership plan."
        )

    cautions = ["Figures are estimates based on the numbers you entered."]
    if result.risk_flags:
        cautions.append("Review the risk flags before committing to either option.")

    if verbosity == "detailed":
        explanation = (
            f"{explanation} {result.summary} Monthly all-in to the cent: buying "
            f"{format_currency_with_cents(result.buy_monthly_all_in)}, leasing "
            f"{format_currency_with_cents(result.lease_monthly_all_in)}."
        )
        if ownership_months and lease_term_months:
            bullets[3] = (
                f"The lease runs {format_months(lease_term_months)}; you plan to keep the car "
                f"{format_months(ownership_months)}."
            )
        for flag in result.risk_flags:
            if len(bullets) >= 5:
                break
            bullets.append(flag)

    return {
        "headline": format_verdict(result.verdict),
        "explanation": explanation,
        "bullets": bullets,
        "cautions": cautions,
    }
