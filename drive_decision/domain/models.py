"""Domain models - immutable value objects for a single buy-vs-lease evaluation"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

CreditScoreBand = Literal["below_620", "620_679", "680_739", "740_plus"]
RiskTolerance = Literal["low", "medium", "high"]
StressLevel = Literal["low", "medium", "high"]
Verdict = Literal["buy", "lease"]
Confidence = Literal["low", "medium", "high"]
LeaseEndPlan = Literal["return", "buyout"]


@dataclass(frozen=True)
class UserProfile:
    """Buyer's monthly cash-flow picture"""

    monthly_net_income: float
    monthly_fixed_expenses: float
    current_savings: float
    credit_score_band: CreditScoreBand  # reserved for APR lookup, not used in arithmetic
    risk_tolerance: RiskTolerance


@dataclass(frozen=True)
class BuyScenario:
    """Financed purchase terms"""

    vehicle_price: float
    down_payment: float
    apr_percent: float
    term_months: int
    est_monthly_insurance: float
    est_monthly_maintenance: float
    ownership_months: int  # comparison horizon for the whole decision


@dataclass(frozen=True)
class LeaseScenario:
    """Lease deal terms"""

    msrp: float
    monthly_payment: float
    due_at_signing: float
    term_months: int
    mileage_allowance_per_year: float
    est_miles_per_year: float
    est_excess_mile_fee: float
    est_monthly_insurance: float
    est_monthly_maintenance: float
    lease_end_plan: LeaseEndPlan = "return"
    est_buyout_price: Optional[float] = None


@dataclass(frozen=True)
class Thresholds:
    """Ratio ceilings and buffer floors for one risk tolerance"""

    ratio_low_max: float
    ratio_med_max: float
    ratio_high_max: float
    buffer_low_min: float
    buffer_med_min: float
    buffer_high_min: float


@dataclass(frozen=True)
class StressBreakdown:
    """Stress scoring output for one monthly car cost"""

    car_to_income_ratio: float
    post_car_buffer: float
    stress_score: float
    stress_level: StressLevel
    flags: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DecisionResult:
    """Output of a buy-vs-lease evaluation"""

    verdict: Verdict
    confidence: Confidence
    summary: str
    buy_total_cost: float
    lease_total_cost: float
    buy_monthly_all_in: float
    lease_monthly_all_in: float
    buy_stress_score: float
    lease_stress_score: float
    risk_flags: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AmortizationRow:
    """Single month in a loan amortization schedule"""

    month: int
    payment: float
    interest: float
    principal: float
    balance: float


@dataclass(frozen=True)
class WhatIfAdjustments:
    """Loan-side overrides applied on top of a saved buy scenario"""

    vehicle_price: Optional[float] = None
    down_payment: Optional[float] = None
    term_months: Optional[int] = None
    apr_percent: Optional[float] = None
    reprice_lease: bool = False
