"""GET /v1/decision/history - Fetch recent decisions"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from drive_decision.api.v1.schemas import HistoryResponse, HistoryItem
from drive_decision.infrastructure.database.session import get_db
from drive_decision.infrastructure.database.repositories import DecisionRepository

router = APIRouter()


@router.get("/decision/history", response_model=HistoryResponse)
def get_decision_history(
    limit: int = Query(20, ge=1, le=100, description="Maximum number of decisions"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent decisions, newest first.

    Returns:
        List of decisions with verdict, confidence and horizon totals
    """
    decisions = DecisionRepository(db).list_recent(limit=limit)

    history_items = [
        HistoryItem(
            decision_id=str(d.id),
            verdict=d.verdict,
            confidence=d.confidence,
            buy_total_cost=d.buy_total_cost,
            lease_total_cost=d.lease_total_cost,
            created_at=d.created_at.isoformat(),
        )
        for d in decisions
    ]

    return HistoryResponse(decisions=history_items)
