"""Competence (billing month) parsing."""

import calendar
import re
from dataclasses import dataclass
from datetime import date

from src.services.errors import InvalidCompetenceError

COMPETENCE_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class BillingPeriod:
    """Calendar month being billed, both ends inclusive."""

    competence: str
    year: int
    month: int
    start_date: date
    end_date: date

    @property
    def days_in_month(self) -> int:
        return self.end_date.day


def parse_competence(value: str) -> BillingPeriod:
    """Parse a "YYYY-MM" competence string into its month window.

    Args:
        value: Competence such as "2024-02"

    Returns:
        BillingPeriod spanning the first to the last calendar day of the month

    Raises:
        InvalidCompetenceError: If the string is not YYYY-MM or month is not 1-12
    """
    match = COMPETENCE_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidCompetenceError(f"Invalid competence {value!r}: expected YYYY-MM")

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise InvalidCompetenceError(f"Invalid competence {value!r}: month must be 01-12")

    last_day = calendar.monthrange(year, month)[1]
    return BillingPeriod(
        competence=f"{year:04d}-{month:02d}",
        year=year,
        month=month,
        start_date=date(year, month, 1),
        end_date=date(year, month, last_day),
    )


__all__ = ["BillingPeriod", "parse_competence"]
