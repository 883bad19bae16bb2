"""Association history normalization for billing.

Turns raw VehicleAssociation rows plus the current vehicle snapshot into one
interval list per vehicle:
- vehicles without recorded history get a synthetic open interval starting
  on their creation date, owned by their current customer
- recorded intervals are trusted as-is (no clamping or repair)

Malformed history (gaps, overlaps, inverted intervals) is reported as
HistoryIssue records and logged as warnings; it never aborts billing.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, NamedTuple

logger = logging.getLogger(__name__)


class AssociationWindow(NamedTuple):
    """One period a vehicle belonged to a customer (both ends inclusive)."""

    vehicle_id: int
    customer_id: int
    start_date: date
    end_date: date | None  # None = still open
    synthetic: bool = False


class HistoryIssue(NamedTuple):
    """Data-integrity finding in a vehicle's association history."""

    vehicle_id: int
    kind: str  # "gap", "overlap" or "inverted"
    detail: str


class NormalizedHistory(NamedTuple):
    """Normalizer output: per-vehicle windows plus integrity findings."""

    windows: dict[int, list[AssociationWindow]]
    issues: list[HistoryIssue]

    def iter_windows(self) -> Iterator[AssociationWindow]:
        for vehicle_id in sorted(self.windows):
            yield from self.windows[vehicle_id]


def creation_date(value: datetime | date) -> date:
    """Calendar date of a vehicle's creation timestamp."""
    if isinstance(value, datetime):
        return value.date()
    return value


def window_order(window: AssociationWindow) -> tuple:
    """Sort key: start date, then closed before open, then end date."""
    return (window.start_date, window.end_date is None, window.end_date or date.max)


def normalize_history(associations: Iterable, vehicles: Iterable) -> NormalizedHistory:
    """Build the complete interval set for every vehicle.

    Args:
        associations: Rows with vehicle_id, customer_id, start_date, end_date
        vehicles: Rows with id, customer_id, created_at

    Returns:
        NormalizedHistory with windows keyed by vehicle id (ordered by start
        date) and any integrity issues found
    """
    windows: dict[int, list[AssociationWindow]] = defaultdict(list)
    for association in associations:
        windows[association.vehicle_id].append(
            AssociationWindow(
                vehicle_id=association.vehicle_id,
                customer_id=association.customer_id,
                start_date=association.start_date,
                end_date=association.end_date,
            )
        )

    created_on: dict[int, date] = {}
    synthesized = 0
    for vehicle in vehicles:
        created_on[vehicle.id] = creation_date(vehicle.created_at)
        if vehicle.id not in windows:
            windows[vehicle.id].append(
                AssociationWindow(
                    vehicle_id=vehicle.id,
                    customer_id=vehicle.customer_id,
                    start_date=created_on[vehicle.id],
                    end_date=None,
                    synthetic=True,
                )
            )
            synthesized += 1

    issues: list[HistoryIssue] = []
    for vehicle_id, vehicle_windows in windows.items():
        vehicle_windows.sort(key=window_order)
        issues.extend(inspect_history(vehicle_id, vehicle_windows, created_on.get(vehicle_id)))

    for issue in issues:
        logger.warning(
            "Association history issue: vehicle_id=%d kind=%s %s",
            issue.vehicle_id,
            issue.kind,
            issue.detail,
        )

    logger.debug(
        "Normalized history: %d vehicles, %d synthetic intervals, %d issues",
        len(windows),
        synthesized,
        len(issues),
    )
    return NormalizedHistory(windows=dict(windows), issues=issues)


def inspect_history(
    vehicle_id: int,
    windows: list[AssociationWindow],
    created_on: date | None = None,
) -> list[HistoryIssue]:
    """Check one vehicle's sorted windows for gaps, overlaps and inverted ranges.

    A window starting on the day the previous one ended is a regular same-day
    handover and is not reported.
    """
    issues: list[HistoryIssue] = []

    for window in windows:
        if window.end_date is not None and window.end_date < window.start_date:
            issues.append(
                HistoryIssue(
                    vehicle_id,
                    "inverted",
                    f"interval ends {window.end_date} before it starts {window.start_date}",
                )
            )

    if windows and created_on is not None and windows[0].start_date > created_on:
        issues.append(
            HistoryIssue(
                vehicle_id,
                "gap",
                f"history starts {windows[0].start_date}, vehicle created {created_on}",
            )
        )

    for previous, current in zip(windows, windows[1:]):
        if previous.end_date is None:
            issues.append(
                HistoryIssue(
                    vehicle_id,
                    "overlap",
                    f"open interval from {previous.start_date} overlaps interval "
                    f"starting {current.start_date}",
                )
            )
        elif current.start_date < previous.end_date:
            issues.append(
                HistoryIssue(
                    vehicle_id,
                    "overlap",
                    f"interval starting {current.start_date} begins before previous "
                    f"ends {previous.end_date}",
                )
            )
        elif current.start_date > previous.end_date + timedelta(days=1):
            issues.append(
                HistoryIssue(
                    vehicle_id,
                    "gap",
                    f"no owner between {previous.end_date} and {current.start_date}",
                )
            )

    return issues


__all__ = [
    "AssociationWindow",
    "HistoryIssue",
    "NormalizedHistory",
    "creation_date",
    "inspect_history",
    "normalize_history",
    "window_order",
]
