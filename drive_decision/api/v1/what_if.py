"""POST /v1/what-if - recompute a decision with adjusted loan terms"""

from fastapi import APIRouter, Depends

from drive_decision.api.v1.schemas import DecisionResultSchema, WhatIfRequest
from drive_decision.api.dependencies import get_policy
from drive_decision.domain.policy import DecisionPolicy
from drive_decision.domain.what_if import recalculate

router = APIRouter()


@router.post("/what-if", response_model=DecisionResultSchema)
def what_if(
    request_body: WhatIfRequest,
    policy: DecisionPolicy = Depends(get_policy),
):
    """
    Rerun the engine with slider-style overrides (price, down payment, term, APR).

    Nothing is persisted; each call is an independent recompute.
    """
    result = recalculate(
        request_body.user.to_domain(),
        request_body.buy.to_domain(),
        request_body.lease.to_domain(),
        request_body.adjustments.to_domain(),
        policy,
    )
    return DecisionResultSchema.from_domain(result)
