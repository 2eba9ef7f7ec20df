"""
Year inference algorithm for dates without year information.
Uses Sequential Year Rollover Inference over the file's row order.
"""

import calendar
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Sequence

from ..logger import setup_logger
from ..models import ParsedDate

logger = setup_logger(__name__)


class RowOrder(str, Enum):
    """Chronological direction of the rows in an export."""
    NEWEST_FIRST = "newest_first"
    OLDEST_FIRST = "oldest_first"


def infer_years(
    parsed_dates: Sequence[ParsedDate],
    reference_date: Optional[datetime] = None,
    order: RowOrder = RowOrder.NEWEST_FIRST,
) -> list[datetime]:
    """
    Assign a full date to every parsed date, inferring missing years.

    Uses Sequential Year Rollover Inference, scanning newest to oldest:
    - A resolved date anchors the current year and month.
    - A month number that increases relative to the previous row means the
      scan crossed a year boundary backwards, so the year is decremented.
    - A candidate that would lie in the future is moved back one year.

    The heuristic only holds when rows are sorted by date. Marketplace
    exports list the most recent transaction first; pass
    RowOrder.OLDEST_FIRST for files sorted the other way.

    Args:
        parsed_dates: Parsed dates in file row order
        reference_date: "Now" for the future-date check (defaults to now)
        order: Chronological direction of the rows

    Returns:
        List of complete datetimes, same length and order as parsed_dates
    """
    if reference_date is None:
        reference_date = datetime.now()

    if order == RowOrder.OLDEST_FIRST:
        inferred = _infer_newest_first(list(reversed(parsed_dates)), reference_date)
        return list(reversed(inferred))

    return _infer_newest_first(parsed_dates, reference_date)


def _infer_newest_first(parsed_dates: Sequence[ParsedDate], now: datetime) -> list[datetime]:
    results: list[datetime] = []
    current_year = now.year
    last_month: Optional[int] = None  # 0-11

    for parsed in parsed_dates:
        if parsed.resolved is not None:
            results.append(parsed.resolved)
            current_year = parsed.resolved.year
            last_month = parsed.resolved.month - 1
        elif parsed.needs_year_inference and parsed.month_day is not None:
            month, day = parsed.month_day

            # e.g. Jan followed by Dec while scanning backwards -> previous year
            if last_month is not None and month > last_month:
                current_year -= 1

            candidate = _calendar_date(current_year, month, day, parsed.time_of_day)
            if candidate > now:
                current_year -= 1
                candidate = _calendar_date(current_year, month, day, parsed.time_of_day)

            logger.debug(f"Inferred year for {month + 1:02d}-{day:02d}: {candidate.year}")
            results.append(candidate)
            last_month = month
        else:
            logger.warning("Unparsed date reached year inference, using reference date")
            results.append(now)

    return results


def _calendar_date(year: int, month: int, day: int, clock: Optional[time] = None) -> datetime:
    """The given day at `clock` (midnight if unset); 29 Feb falls back to 28 Feb outside leap years."""
    last_day = calendar.monthrange(year, month + 1)[1]
    return datetime.combine(date(year, month + 1, min(day, last_day)), clock if clock is not None else time())
