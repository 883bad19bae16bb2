"""Overlap/proration engine for monthly subscriber billing.

For a billing month, each association window is intersected with the month
window. Overlap days (both ends inclusive) are charged as a fraction of the
owning customer's current monthly fee:

    contribution = round(fee * overlap_days / days_in_month, 2)   # ROUND_HALF_UP

Contributions are accumulated per customer. Fee history is not tracked: the
fee is read from the current customer record.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from src.services.billing_period import BillingPeriod
from src.services.history_normalizer import AssociationWindow

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class CustomerCharge:
    """Accumulated amount and contributing vehicles for one customer."""

    customer_id: int
    total: Decimal = Decimal("0.00")
    vehicle_ids: set[int] = field(default_factory=set)

    def add(self, vehicle_id: int, contribution: Decimal) -> None:
        self.total += contribution
        self.vehicle_ids.add(vehicle_id)


def build_fee_table(customers: Iterable) -> dict[int, Decimal]:
    """Map billable customer id -> monthly fee.

    Only subscribers with a positive fee are billable; a non-subscriber's fee
    is ignored even if set.
    """
    fees: dict[int, Decimal] = {}
    for customer in customers:
        if not customer.is_subscriber or customer.monthly_fee is None:
            continue
        fee = Decimal(str(customer.monthly_fee))
        if fee > 0:
            fees[customer.id] = fee
    return fees


def overlap_days(window: AssociationWindow, period: BillingPeriod) -> int:
    """Days (inclusive) the window overlaps the billing month, 0 if disjoint."""
    window_end = window.end_date if window.end_date is not None else date.max

    if window.start_date > period.end_date or window_end < period.start_date:
        return 0

    overlap_start = max(window.start_date, period.start_date)
    overlap_end = min(window_end, period.end_date)
    if overlap_end < overlap_start:
        return 0

    return (overlap_end - overlap_start).days + 1


def prorate(fee: Decimal, days: int, days_in_month: int) -> Decimal:
    """Fee share for `days` out of `days_in_month`, rounded half-up to cents."""
    return (fee * days / days_in_month).quantize(CENT, rounding=ROUND_HALF_UP)


def aggregate_charges(
    period: BillingPeriod,
    windows: Iterable[AssociationWindow],
    customers: Iterable,
) -> dict[int, CustomerCharge]:
    """Compute per-customer prorated totals for a billing month.

    A vehicle that changed owner during the month contributes to each owner
    for the days it held the vehicle, so the same vehicle can appear under
    several customers.

    Args:
        period: Parsed billing month
        windows: Normalized association windows
        customers: Current customer snapshot (is_subscriber, monthly_fee)

    Returns:
        Mapping customer_id -> CustomerCharge, only for positive totals
    """
    fees = build_fee_table(customers)
    charges: dict[int, CustomerCharge] = {}

    for window in windows:
        days = overlap_days(window, period)
        if days == 0:
            continue

        fee = fees.get(window.customer_id)
        if fee is None:
            continue

        contribution = prorate(fee, days, period.days_in_month)
        charge = charges.setdefault(window.customer_id, CustomerCharge(window.customer_id))
        charge.add(window.vehicle_id, contribution)

        logger.debug(
            "Prorated vehicle_id=%d customer_id=%d: %d/%d days of %s = %s",
            window.vehicle_id,
            window.customer_id,
            days,
            period.days_in_month,
            fee,
            contribution,
        )

    return {
        customer_id: charge
        for customer_id, charge in charges.items()
        if charge.total > 0
    }


__all__ = [
    "CustomerCharge",
    "aggregate_charges",
    "build_fee_table",
    "overlap_days",
    "prorate",
]
