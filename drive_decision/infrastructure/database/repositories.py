"""Data access layer for stored decisions"""

import uuid
from dataclasses import asdict
from typing import Optional
from sqlalchemy.orm import Session
from drive_decision.infrastructure.database.models import DecisionRecord
from drive_decision.domain.models import BuyScenario, DecisionResult, LeaseScenario, UserProfile


class DecisionRepository:
    """Repository for buy-vs-lease decisions"""

    def __init__(self, db: Session):
        self.db = db

    def create_decision(
        self,
        user: UserProfile,
        buy: BuyScenario,
        lease: LeaseScenario,
        result: DecisionResult,
    ) -> DecisionRecord:
        """Persist decision result and its inputs"""
        record = DecisionRecord(
            verdict=result.verdict,
            confidence=result.confidence,
            summary=result.summary,
            buy_total_cost=result.buy_total_cost,
            lease_total_cost=result.lease_total_cost,
            buy_monthly_all_in=result.buy_monthly_all_in,
            lease_monthly_all_in=result.lease_monthly_all_in,
            buy_stress_score=result.buy_stress_score,
            lease_stress_score=result.lease_stress_score,
            risk_flags=list(result.risk_flags),
            inputs={"user": asdict(user), "buy": asdict(buy), "lease": asdict(lease)},
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_decision_by_id(self, decision_id: uuid.UUID) -> Optional[DecisionRecord]:
        """Fetch a stored decision"""
        return (
            self.db.query(DecisionRecord)
            .filter(DecisionRecord.id == decision_id)
            .first()
        )

    def list_recent(self, limit: int = 20) -> list[DecisionRecord]:
        """Most recent decisions first"""
        return (
            self.db.query(DecisionRecord)
            .order_by(DecisionRecord.created_at.desc())
            .limit(limit)
            .all()
        )
