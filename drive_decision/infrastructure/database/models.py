"""SQLAlchemy ORM models for stored decisions"""

import uuid
from sqlalchemy import Column, DateTime, Float, JSON, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class DecisionRecord(Base):
    """One buy-vs-lease evaluation with the inputs that produced it"""

    __tablename__ = "drive_decision"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    verdict = Column(Text, nullable=False, index=True)
    confidence = Column(Text, nullable=False)
    summary = Column(Text, nullable=False)
    buy_total_cost = Column(Float, nullable=False)
    lease_total_cost = Column(Float, nullable=False)
    buy_monthly_all_in = Column(Float, nullable=False)
    lease_monthly_all_in = Column(Float, nullable=False)
    buy_stress_score = Column(Float, nullable=False)
    lease_stress_score = Column(Float, nullable=False)
    risk_flags = Column(JSON, nullable=False)
    inputs = Column(JSON, nullable=False)  # {"user": ..., "buy": ..., "lease": ...}
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
