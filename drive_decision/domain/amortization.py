"""Loan amortization schedule generation"""

from typing import List

from drive_decision.domain.models import AmortizationRow
from drive_decision.utils.math_utils import monthly_payment_from_loan


def generate_amortization_schedule(
    principal: float,
    apr_percent: float,
    term_months: int,
) -> List[AmortizationRow]:
    """
    Month-by-month split of each loan payment into interest and principal.

    Requirements:
    - Amounts rounded to cents
    - Last payment absorbs rounding drift so the balance ends at exactly 0

    Example:
        $20,000 at 6% over 60 months -> first row pays $386.66,
        $100.00 of it interest, $286.66 principal
    """
    payment = monthly_payment_from_loan(principal, apr_percent, term_months)
    if principal <= 0:
        return []

    rate = (apr_percent / 100) / 12
    balance = round(principal, 2)
    rows = []

    for month in range(1, term_months + 1):
        interest = round(balance * rate, 2)

        if month == term_months:
            # Final payment clears whatever balance rounding left behind
            principal_paid = balance
            amount = round(principal_paid + interest, 2)
        else:
            amount = round(payment, 2)
            principal_paid = round(amount - interest, 2)

        balance = round(balance - principal_paid, 2)
        rows.append(
            AmortizationRow(
                month=month,
                payment=amount,
                interest=interest,
                principal=principal_paid,
                balance=max(balance, 0.0),
            )
        )

    return rows


def total_interest(schedule: List[AmortizationRow]) -> float:
    """Sum of interest paid across the schedule"""
    return round(sum(row.interest for row in schedule), 2)
