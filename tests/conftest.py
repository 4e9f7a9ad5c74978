"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from drive_decision.api.main import create_app
from drive_decision.infrastructure.database.models import Base
from drive_decision.infrastructure.database.session import get_db
from drive_decision.domain.models import BuyScenario, LeaseScenario, UserProfile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def user() -> UserProfile:
    """Mid-income buyer with a medium risk tolerance"""
    return UserProfile(
        monthly_net_income=6500,
        monthly_fixed_expenses=3800,
        current_savings=12000,
        credit_score_band="680_739",
        risk_tolerance="medium",
    )


@pytest.fixture
def buy() -> BuyScenario:
    """$42k car, 10% down, 7.5% APR over 72 months, kept for the full loan"""
    return BuyScenario(
        vehicle_price=42000,
        down_payment=4200,
        apr_percent=7.5,
        term_months=72,
        est_monthly_insurance=180,
        est_monthly_maintenance=75,
        ownership_months=72,
    )


@pytest.fixture
def lease() -> LeaseScenario:
    """36-month lease on the same car, returned at the end"""
    return LeaseScenario(
        msrp=42000,
        monthly_payment=550,
        due_at_signing=3000,
        term_months=36,
        mileage_allowance_per_year=12000,
        est_miles_per_year=12000,
        est_excess_mile_fee=0.25,
        est_monthly_insurance=180,
        est_monthly_maintenance=40,
        lease_end_plan="return",
    )


@pytest.fixture
def decision_payload() -> dict:
    """Wire-format request body for POST /v1/decision"""
    return {
        "user": {
            "monthlyNetIncome": 6500,
            "monthlyFixedExpenses": 3800,
            "currentSavings": 12000,
            "creditScoreBand": "680_739",
            "riskTolerance": "medium",
        },
        "buy": {
            "vehiclePrice": 42000,
            "downPayment": 4200,
            "aprPercent": 7.5,
            "termMonths": 72,
            "estMonthlyInsurance": 180,
            "estMonthlyMaintenance": 75,
            "ownershipMonths": 72,
        },
        "lease": {
            "msrp": 42000,
            "monthlyPayment": 550,
            "dueAtSigning": 3000,
            "termMonths": 36,
            "mileageAllowancePerYear": 12000,
            "estMilesPerYear": 12000,
            "estExcessMileFee": 0.25,
            "estMonthlyInsurance": 180,
            "estMonthlyMaintenance": 40,
            "leaseEndPlan": "return",
        },
    }
