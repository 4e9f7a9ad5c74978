"""Business policy constants for stress scoring and the buy-vs-lease verdict"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DecisionPolicy:
    """
    Tunable decision policy.

    Defaults reproduce the production policy. Override through
    ``Settings.policy`` (env vars ``POLICY__<FIELD>``) rather than editing
    the engine.
    """

    # Stress score composition
    ratio_weight: float = 0.45
    buffer_weight: float = 0.55

    # Continuous penalties past the worst band
    ratio_penalty_span: float = 0.10  # ratio points over the high ceiling to saturate
    ratio_penalty_max: float = 15.0
    buffer_penalty_span: float = 500.0  # dollars of deficit to saturate
    buffer_penalty_max: float = 5.0

    # Stress level bands
    high_stress_min: float = 70.0
    medium_stress_min: float = 40.0

    # Extra flags
    ratio_flag_threshold: float = 0.25

    # Verdict and confidence
    verdict_stress_gap: float = 8.0
    medium_confidence_gap: float = 8.0
    high_confidence_gap: float = 15.0

    # Fragility test
    income_shock_percent: float = 10.0
    max_income_shock_percent: float = 80.0

    # Savings impact
    min_buffer_months: float = 2.0

    # Output
    risk_flag_cap: int = 12

    # Known gap: loan payments keep accruing past payoff when the horizon
    # outlives the loan term. Kept off until product signs off on the change.
    stop_buy_payments_after_payoff: bool = False


DEFAULT_POLICY = DecisionPolicy()
