"""What-if recalculation - rerun the decision with adjusted loan terms"""

from dataclasses import replace

from drive_decision.domain.decision import decide_buy_vs_lease
from drive_decision.domain.models import (
    BuyScenario,
    DecisionResult,
    LeaseScenario,
    UserProfile,
    WhatIfAdjustments,
)
from drive_decision.domain.policy import DEFAULT_POLICY, DecisionPolicy
from drive_decision.utils.math_utils import estimate_lease_payment


def apply_adjustments(
    buy: BuyScenario,
    lease: LeaseScenario,
    adjustments: WhatIfAdjustments,
) -> tuple[BuyScenario, LeaseScenario]:
    """
    Return new scenarios with the adjusted fields replaced.

    When reprice_lease is set and the vehicle price changed, the lease is
    re-quoted from the new price (MSRP and an estimated monthly payment).
    """
    changes = {
        name: value
        for name, value in (
            ("vehicle_price", adjustments.vehicle_price),
            ("down_payment", adjustments.down_payment),
            ("term_months", adjustments.term_months),
            ("apr_percent", adjustments.apr_percent),
        )
        if value is not None
    }
    adjusted_buy = replace(buy, **changes)

    adjusted_lease = lease
    if adjustments.reprice_lease and adjustments.vehicle_price is not None:
        adjusted_lease = replace(
            lease,
            msrp=adjustments.vehicle_price,
            monthly_payment=estimate_lease_payment(adjustments.vehicle_price, lease.term_months),
        )

    return adjusted_buy, adjusted_lease


def recalculate(
    user: UserProfile,
    buy: BuyScenario,
    lease: LeaseScenario,
    adjustments: WhatIfAdjustments,
    policy: DecisionPolicy = DEFAULT_POLICY,
) -> DecisionResult:
    """Pure recompute for one what-if interaction; inputs are never mutated"""
    adjusted_buy, adjusted_lease = apply_adjustments(buy, lease, adjustments)
    return decide_buy_vs_lease(user, adjusted_buy, adjusted_lease, policy)
