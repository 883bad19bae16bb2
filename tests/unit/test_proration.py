"""Unit tests for the overlap/proration engine."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from src.services.billing_period import parse_competence
from src.services.history_normalizer import AssociationWindow
from src.services.proration import (
    aggregate_charges,
    build_fee_table,
    overlap_days,
    prorate,
)


def customer(customer_id, fee="300.00", is_subscriber=True):
    return SimpleNamespace(
        id=customer_id,
        is_subscriber=is_subscriber,
        monthly_fee=Decimal(fee) if fee is not None else None,
    )


def window(vehicle_id, customer_id, start, end=None):
    return AssociationWindow(vehicle_id, customer_id, start, end)


class TestOverlapDays:
    """Tests for overlap_days."""

    period = parse_competence("2024-04")

    def test_interval_covering_whole_month(self):
        assert overlap_days(window(1, 1, date(2023, 1, 1)), self.period) == 30

    def test_interval_starting_mid_month(self):
        assert overlap_days(window(1, 1, date(2024, 4, 16)), self.period) == 15

    def test_interval_ending_mid_month_counts_both_ends(self):
        assert overlap_days(window(1, 1, date(2024, 3, 1), date(2024, 4, 15)), self.period) == 15

    def test_single_day_interval(self):
        assert overlap_days(window(1, 1, date(2024, 4, 30), date(2024, 4, 30)), self.period) == 1

    @pytest.mark.parametrize(
        "start,end",
        [
            (date(2024, 5, 1), None),
            (date(2024, 1, 1), date(2024, 3, 31)),
            (date(2024, 5, 1), date(2024, 5, 31)),
        ],
    )
    def test_interval_outside_month_is_zero(self, start, end):
        assert overlap_days(window(1, 1, start, end), self.period) == 0

    def test_inverted_interval_inside_month_is_zero(self):
        assert overlap_days(window(1, 1, date(2024, 4, 20), date(2024, 4, 10)), self.period) == 0


class TestProrate:
    """Tests for prorate."""

    def test_full_month_is_exact_fee(self):
        assert prorate(Decimal("250.00"), 30, 30) == Decimal("250.00")

    def test_rounds_half_up_to_cents(self):
        # 99.99 * 15 / 30 = 49.995
        assert prorate(Decimal("99.99"), 15, 30) == Decimal("50.00")

    def test_scenario_amount(self):
        assert prorate(Decimal("300.00"), 20, 29) == Decimal("206.90")


class TestBuildFeeTable:
    """Tests for build_fee_table."""

    def test_only_subscribers_with_positive_fee_are_billable(self):
        fees = build_fee_table(
            [
                customer(1, "150.00"),
                customer(2, "150.00", is_subscriber=False),
                customer(3, None),
                customer(4, "0.00"),
                customer(5, "-10.00"),
            ]
        )
        assert fees == {1: Decimal("150.00")}


class TestAggregateCharges:
    """Tests for aggregate_charges."""

    def test_full_month_subscriber_pays_exact_fee(self):
        charges = aggregate_charges(
            parse_competence("2024-04"),
            [window(1, 1, date(2024, 1, 1))],
            [customer(1, "250.00")],
        )

        assert charges[1].total == Decimal("250.00")
        assert charges[1].vehicle_ids == {1}

    def test_vehicle_created_mid_month_charged_from_creation(self):
        charges = aggregate_charges(
            parse_competence("2024-02"),
            [window(1, 1, date(2024, 2, 10))],
            [customer(1, "300.00")],
        )

        assert charges[1].total == Decimal("206.90")

    def test_owner_change_splits_between_both_customers(self):
        fee = Decimal("99.99")
        charges = aggregate_charges(
            parse_competence("2024-04"),
            [
                window(7, 1, date(2024, 1, 1), date(2024, 4, 15)),
                window(7, 2, date(2024, 4, 16)),
            ],
            [customer(1, str(fee)), customer(2, str(fee))],
        )

        a, b = charges[1].total, charges[2].total
        # 99.99 * 15 / 30 = 49.995, rounded half-up
        assert a == Decimal("50.00")
        assert b == a
        assert abs((a + b) - fee) <= Decimal("0.01")
        assert charges[1].vehicle_ids == {7}
        assert charges[2].vehicle_ids == {7}

    def test_multiple_vehicles_accumulate_per_customer(self):
        charges = aggregate_charges(
            parse_competence("2024-04"),
            [
                window(1, 1, date(2024, 1, 1)),
                window(2, 1, date(2024, 4, 16)),
            ],
            [customer(1, "300.00")],
        )

        assert charges[1].total == Decimal("450.00")
        assert charges[1].vehicle_ids == {1, 2}

    def test_non_billable_customers_never_appear(self):
        charges = aggregate_charges(
            parse_competence("2024-04"),
            [
                window(1, 1, date(2024, 1, 1)),
                window(2, 2, date(2024, 1, 1)),
                window(3, 3, date(2024, 1, 1)),
                window(4, 99, date(2024, 1, 1)),
            ],
            [
                customer(1, "300.00", is_subscriber=False),
                customer(2, "0.00"),
                customer(3, None),
            ],
        )

        assert charges == {}

    def test_intervals_outside_month_contribute_nothing(self):
        charges = aggregate_charges(
            parse_competence("2024-04"),
            [
                window(1, 1, date(2024, 5, 1)),
                window(2, 1, date(2024, 1, 1), date(2024, 3, 31)),
            ],
            [customer(1, "300.00")],
        )

        assert charges == {}

    def test_leap_february_uses_29_day_basis(self):
        charges = aggregate_charges(
            parse_competence("2024-02"),
            [window(1, 1, date(2024, 2, 15))],
            [customer(1, "290.00")],
        )
        # 15 of 29 days
        assert charges[1].total == Decimal("150.00")

    def test_common_february_uses_28_day_basis(self):
        charges = aggregate_charges(
            parse_competence("2023-02"),
            [window(1, 1, date(2023, 2, 15))],
            [customer(1, "280.00")],
        )
        # 14 of 28 days
        assert charges[1].total == Decimal("140.00")
