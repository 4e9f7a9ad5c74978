"""GET /v1/amortization - loan amortization schedule"""

from fastapi import APIRouter, Query

from drive_decision.api.v1.schemas import AmortizationResponse, AmortizationRowSchema
from drive_decision.domain.amortization import generate_amortization_schedule, total_interest
from drive_decision.utils.math_utils import monthly_payment_from_loan

router = APIRouter()


@router.get("/amortization", response_model=AmortizationResponse)
def get_amortization(
    principal: float = Query(..., ge=0, description="Amount financed"),
    apr_percent: float = Query(..., alias="aprPercent", ge=0),
    term_months: int = Query(..., alias="termMonths", gt=0, le=120),
):
    """
    Month-by-month payment split for a loan.

    Returns:
        Monthly payment, total interest and the full schedule
    """
    monthly_payment = monthly_payment_from_loan(principal, apr_percent, term_months)
    schedule = generate_amortization_schedule(principal, apr_percent, term_months)

    return AmortizationResponse(
        monthly_payment=round(monthly_payment, 2),
        total_interest=total_interest(schedule),
        schedule=[AmortizationRowSchema.from_domain(row) for row in schedule],
    )
