"""Pydantic schemas for API request/response validation

Wire names are camelCase; snake_case names are accepted too. Range checks
live in the domain engine so rejections name the offending field the same
way for every caller.
"""

from dataclasses import asdict
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from drive_decision.domain.models import (
    AmortizationRow,
    BuyScenario,
    CreditScoreBand,
    DecisionResult,
    LeaseEndPlan,
    LeaseScenario,
    RiskTolerance,
    UserProfile,
    WhatIfAdjustments,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfileSchema(CamelModel):
    monthly_net_income: float
    monthly_fixed_expenses: float
    current_savings: float
    credit_score_band: CreditScoreBand
    risk_tolerance: RiskTolerance

    def to_domain(self) -> UserProfile:
        return UserProfile(**self.model_dump())


class BuyScenarioSchema(CamelModel):
    vehicle_price: float
    down_payment: float
    apr_percent: float
    term_months: int
    est_monthly_insurance: float
    est_monthly_maintenance: float
    ownership_months: int

    def to_domain(self) -> BuyScenario:
        return BuyScenario(**self.model_dump())


class LeaseScenarioSchema(CamelModel):
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

    def to_domain(self) -> LeaseScenario:
        return LeaseScenario(**self.model_dump())


class DecisionRequest(CamelModel):
    """Request body for POST /v1/decision"""

    user: UserProfileSchema
    buy: BuyScenarioSchema
    lease: LeaseScenarioSchema


class DecisionResultSchema(CamelModel):
    """DecisionResult on the wire; finite numbers and known enum values only"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    verdict: Literal["buy", "lease"]
    confidence: Literal["low", "medium", "high"]
    summary: str
    buy_total_cost: float
    lease_total_cost: float
    buy_monthly_all_in: float
    lease_monthly_all_in: float
    buy_stress_score: float
    lease_stress_score: float
    risk_flags: List[str]

    @classmethod
    def from_domain(cls, result: DecisionResult) -> "DecisionResultSchema":
        return cls(**{**asdict(result), "risk_flags": list(result.risk_flags)})

    def to_domain(self) -> DecisionResult:
        data = self.model_dump()
        data["risk_flags"] = tuple(data["risk_flags"])
        return DecisionResult(**data)


class DecisionResponse(DecisionResultSchema):
    """Response for POST /v1/decision and GET /v1/decision/{decision_id}"""

    decision_id: Optional[str] = None


class HistoryItem(CamelModel):
    """Single decision in history"""

    decision_id: str
    verdict: str
    confidence: str
    buy_total_cost: float
    lease_total_cost: float
    created_at: str


class HistoryResponse(CamelModel):
    """Response for GET /v1/decision/history"""

    decisions: List[HistoryItem]


class ExplainRequest(CamelModel):
    """Request body for POST /v1/explain"""

    result: DecisionResultSchema
    user: Optional[UserProfileSchema] = None
    buy: Optional[BuyScenarioSchema] = None
    lease: Optional[LeaseScenarioSchema] = None
    verbosity: Literal["short", "detailed"] = "short"
    use_ai: bool = Field(False, alias="useAI")


class ExplainResponse(CamelModel):
    """Response for POST /v1/explain"""

    headline: str
    explanation: str
    source: Literal["deterministic", "ai"]


class WhatIfAdjustmentsSchema(CamelModel):
    vehicle_price: Optional[float] = None
    down_payment: Optional[float] = None
    term_months: Optional[int] = None
    apr_percent: Optional[float] = None
    reprice_lease: bool = False

    def to_domain(self) -> WhatIfAdjustments:
        return WhatIfAdjustments(**self.model_dump())


class WhatIfRequest(DecisionRequest):
    """Request body for POST /v1/what-if"""

    adjustments: WhatIfAdjustmentsSchema = Field(default_factory=WhatIfAdjustmentsSchema)


class AmortizationRowSchema(CamelModel):
    month: int
    payment: float
    interest: float
    principal: float
    balance: float

    @classmethod
    def from_domain(cls, row: AmortizationRow) -> "AmortizationRowSchema":
        return cls(**asdict(row))


class AmortizationResponse(CamelModel):
    """Response for GET /v1/amortization"""

    monthly_payment: float
    total_interest: float
    schedule: List[AmortizationRowSchema]
