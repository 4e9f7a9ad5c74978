"""
E2E tests for buyer personas through the full API.

Personas:
- comfortable: High income, plenty of savings, cheap car
- stretched: Expensive car on a tight budget
- high_mileage: Drives well past the lease allowance
- buyout_planner: Leases now, plans to buy the car out

The narrated persona test requires the mock narrator server to be running:
    uvicorn mock.narrator_server.main:app --port 8003
"""

import pytest
from fastapi.testclient import TestClient
from drive_decision.config import settings


def _payload(user: dict, buy: dict, lease: dict) -> dict:
    return {"user": user, "buy": buy, "lease": lease}


@pytest.fixture
def comfortable() -> dict:
    return _payload(
        {
            "monthlyNetIncome": 12000,
            "monthlyFixedExpenses": 3000,
            "currentSavings": 60000,
            "creditScoreBand": "740_plus",
            "riskTolerance": "high",
        },
        {
            "vehiclePrice": 30000,
            "downPayment": 10000,
            "aprPercent": 4.9,
            "termMonths": 60,
            "estMonthlyInsurance": 120,
            "estMonthlyMaintenance": 60,
            "ownershipMonths": 60,
        },
        {
            "msrp": 30000,
            "monthlyPayment": 329,
            "dueAtSigning": 2000,
            "termMonths": 36,
            "mileageAllowancePerYear": 12000,
            "estMilesPerYear": 10000,
            "estExcessMileFee": 0.25,
            "estMonthlyInsurance": 120,
            "estMonthlyMaintenance": 30,
        },
    )


@pytest.fixture
def stretched() -> dict:
    return _payload(
        {
            "monthlyNetIncome": 4000,
            "monthlyFixedExpenses": 3200,
            "currentSavings": 1500,
            "creditScoreBand": "620_679",
            "riskTolerance": "low",
        },
        {
            "vehiclePrice": 45000,
            "downPayment": 1000,
            "aprPercent": 10,
            "termMonths": 72,
            "estMonthlyInsurance": 170,
            "estMonthlyMaintenance": 80,
            "ownershipMonths": 72,
        },
        {
            "msrp": 45000,
            "monthlyPayment": 650,
            "dueAtSigning": 3000,
            "termMonths": 36,
            "mileageAllowancePerYear": 12000,
            "estMilesPerYear": 12000,
            "estExcessMileFee": 0.25,
            "estMonthlyInsurance": 170,
            "estMonthlyMaintenance": 80,
        },
    )


@pytest.fixture
def high_mileage() -> dict:
    return _payload(
        {
            "monthlyNetIncome": 7000,
            "monthlyFixedExpenses": 3000,
            "currentSavings": 20000,
            "creditScoreBand": "680_739",
            "riskTolerance": "medium",
        },
        {
            "vehiclePrice": 35000,
            "downPayment": 5000,
            "aprPercent": 5.9,
            "termMonths": 60,
            "estMonthlyInsurance": 150,
            "estMonthlyMaintenance": 60,
            "ownershipMonths": 36,
        },
        {
            "msrp": 35000,
            "monthlyPayment": 399,
            "dueAtSigning": 2500,
            "termMonths": 36,
            "mileageAllowancePerYear": 10000,
            "estMilesPerYear": 18000,
            "estExcessMileFee": 0.25,
            "estMonthlyInsurance": 150,
            "estMonthlyMaintenance": 40,
        },
    )


def test_comfortable_buyer(client: TestClient, comfortable: dict):
    """
    comfortable: Car costs are small next to income
    Expected: Low stress on both sides, cost decides, no risk flags
    """
    response = client.post("/v1/decision", json=comfortable)

    assert response.status_code == 200
    data = response.json()
    assert data["buyStressScore"] == pytest.approx(15)
    assert data["leaseStressScore"] == pytest.approx(15)
    assert data["verdict"] == "lease", "Leasing is cheaper over the horizon"
    assert data["confidence"] == "low"
    assert "total cost breaks the tie" in data["summary"]
    assert data["riskFlags"] == []


def test_stretched_buyer(client: TestClient, stretched: dict):
    """
    stretched: Either option leaves the month in the red
    Expected: High stress, negative cash flow and savings flags
    """
    response = client.post("/v1/decision", json=stretched)

    assert response.status_code == 200
    data = response.json()
    assert data["buyStressScore"] >= 70
    assert data["leaseStressScore"] >= 70
    flags = data["riskFlags"]
    assert "Buy: Negative monthly cash flow after car costs." in flags
    assert "Buy: This scenario creates negative monthly cash flow." in flags
    assert "Lease: Due at signing exceeds current savings." in flags
    assert len(flags) <= 12

    explain = client.post("/v1/explain", json={"result": data, "verbosity": "detailed"})
    assert explain.status_code == 200
    assert data["summary"] in explain.json()["explanation"]


def test_high_mileage_driver(client: TestClient, high_mileage: dict):
    """
    high_mileage: 8,000 miles a year over the allowance
    Expected: Excess mileage charges show up in the lease costs
    """
    response = client.post("/v1/decision", json=high_mileage)

    assert response.status_code == 200
    data = response.json()
    # 399 payment + 2500/36 signing + 190 running + 8000/12 * 0.25 mileage
    assert data["leaseMonthlyAllIn"] == pytest.approx(399 + 2500 / 36 + 190 + 8000 / 12 * 0.25)
    assert data["leaseTotalCost"] == pytest.approx(2500 + 399 * 36 + 190 * 36 + 6000)


def test_buyout_planner(client: TestClient, high_mileage: dict):
    """
    buyout_planner: Keeps the leased car at the end of the term
    Expected: Buyout price added to the lease total once the horizon reaches it
    """
    returned = client.post("/v1/decision", json=high_mileage).json()

    high_mileage["lease"]["leaseEndPlan"] = "buyout"
    high_mileage["lease"]["estBuyoutPrice"] = 22000
    bought_out = client.post("/v1/decision", json=high_mileage).json()

    assert bought_out["leaseTotalCost"] - returned["leaseTotalCost"] == pytest.approx(22000)
    assert bought_out["leaseMonthlyAllIn"] == pytest.approx(returned["leaseMonthlyAllIn"])


def test_buyout_planner_needs_price(client: TestClient, high_mileage: dict):
    high_mileage["lease"]["leaseEndPlan"] = "buyout"

    response = client.post("/v1/decision", json=high_mileage)

    assert response.status_code == 422
    assert response.json()["detail"].startswith("lease.est_buyout_price")


def test_stretched_buyer_what_if(client: TestClient, stretched: dict):
    """A cheaper car with a longer term eases the monthly squeeze"""
    baseline = client.post("/v1/decision", json=stretched).json()

    response = client.post(
        "/v1/what-if",
        json={**stretched, "adjustments": {"vehiclePrice": 28000, "downPayment": 1000, "repriceLease": True}},
    )

    assert response.status_code == 200
    adjusted = response.json()
    assert adjusted["buyMonthlyAllIn"] < baseline["buyMonthlyAllIn"]
    assert adjusted["buyStressScore"] <= baseline["buyStressScore"]


@pytest.mark.integration
def test_comfortable_buyer_narrated(client: TestClient, comfortable: dict, monkeypatch):
    """
    comfortable: Explanation generated by the mock narrator
    Expected: Narrative passes the allowlist and is served as AI
    """
    monkeypatch.setattr(settings, "narrator_enabled", True)
    decision = client.post("/v1/decision", json=comfortable).json()

    response = client.post(
        "/v1/explain",
        json={**comfortable, "result": decision, "useAI": True},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "ai"
    assert data["headline"].startswith("Leasing")
