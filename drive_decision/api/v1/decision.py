"""POST /v1/decision - buy-vs-lease decision endpoint"""

import time
import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from drive_decision.api.v1.schemas import DecisionRequest, DecisionResponse
from drive_decision.api.dependencies import get_policy, get_request_id
from drive_decision.infrastructure.database.session import get_db
from drive_decision.infrastructure.database.repositories import DecisionRepository
from drive_decision.domain.decision import decide_buy_vs_lease
from drive_decision.domain.policy import DecisionPolicy
from drive_decision.infrastructure.observability.metrics import record_decision
from drive_decision.infrastructure.observability.logging import log_decision

router = APIRouter()


@router.post("/decision", response_model=DecisionResponse)
def create_decision(
    request_body: DecisionRequest,
    request: Request,
    db: Session = Depends(get_db),
    policy: DecisionPolicy = Depends(get_policy),
):
    """
    Compare financing and leasing for one buyer.

    Flow:
    1. Convert the request into domain scenarios
    2. Run the deterministic decision engine
    3. Persist the decision with its inputs
    4. Return the decision result
    """
    start_time = time.time()
    request_id = get_request_id(request)

    user = request_body.user.to_domain()
    buy = request_body.buy.to_domain()
    lease = request_body.lease.to_domain()

    result = decide_buy_vs_lease(user, buy, lease, policy)

    try:
        record = DecisionRepository(db).create_decision(user, buy, lease, result)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    decision_id = str(record.id)

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_decision(result.verdict, result.confidence, result.buy_stress_score, result.lease_stress_score)
    log_decision(request_id, decision_id, result.verdict, result.confidence, len(result.risk_flags), duration_ms)

    return DecisionResponse.from_domain(result).model_copy(update={"decision_id": decision_id})


@router.get("/decision/{decision_id}", response_model=DecisionResponse)
def get_decision(decision_id: str, db: Session = Depends(get_db)):
    """Retrieve a stored decision result"""
    try:
        decision_uuid = uuid.UUID(decision_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid decision ID format")

    record = DecisionRepository(db).get_decision_by_id(decision_uuid)
    if not record:
        raise HTTPException(status_code=404, detail="Decision not found")

    return DecisionResponse(
        decision_id=str(record.id),
        verdict=record.verdict,
        confidence=record.confidence,
        summary=record.summary,
        buy_total_cost=record.buy_total_cost,
        lease_total_cost=record.lease_total_cost,
        buy_monthly_all_in=record.buy_monthly_all_in,
        lease_monthly_all_in=record.lease_monthly_all_in,
        buy_stress_score=record.buy_stress_score,
        lease_stress_score=record.lease_stress_score,
        risk_flags=record.risk_flags,
    )
