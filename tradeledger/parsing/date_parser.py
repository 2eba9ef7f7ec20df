"""
Date token parsing for marketplace CSV exports.
Classifies a token by shape (ISO, numeric with slashes, named month) and
parses it, flagging year-less dates for sequential year inference.
"""

import calendar
import re
from datetime import datetime, time
from typing import Optional

import pandas as pd

from ..config import (
    MONTH_LOOKUP,
    SLASH_TWO_DIGIT_YEAR_PIVOT,
    NAMED_TWO_DIGIT_YEAR_PIVOT,
    MIN_FOUR_DIGIT_YEAR,
)
from ..logger import setup_logger
from ..models import ParsedDate

logger = setup_logger(__name__)

_NUMERIC_SEPARATORS = re.compile(r"[/\s,]+")
_LEADING_INT = re.compile(r"\d+")
_CLOCK = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")
_DAY_NUMBER = re.compile(r"^(\d+)(?:st|nd|rd|th|º|ª)?$")


def parse_transaction_date(value: str) -> ParsedDate:
    """
    Parse a single date token from a transaction row.

    Shapes are tried in priority order:
        1. ISO 8601 ("2024-01-15T10:00:00Z")
        2. Numeric with slashes ("15/01/2024", "01/15/24 10:30")
        3. Named month ("20 Aug", "Aug 20 2024", "5 de março de 2024")
        4. Anything pandas can parse

    Never raises: an unparseable token yields ParsedDate.failed().

    Year-less named-month dates are stricter than a plain month lookup: a
    day past the end of the month even in a leap year ("30 Feb") fails
    here instead of being handed to year inference, where it could only
    roll over into a different month.

    Args:
        value: Raw date cell

    Returns:
        ParsedDate with either a resolved datetime, a month/day pair that
        needs year inference, or neither (failure)
    """
    if not isinstance(value, str) or not value.strip():
        return ParsedDate.failed()

    cleaned = value.strip()

    if 'T' in cleaned or 'Z' in cleaned:
        result = _parse_iso_date(cleaned)
    elif '/' in cleaned:
        result = _parse_numeric_date(cleaned)
    elif any(char.isalpha() for char in cleaned):
        result = _parse_named_month_date(cleaned)
    else:
        resolved = _coerce_timestamp(cleaned)
        result = ParsedDate(resolved=resolved, has_time_component=':' in cleaned)

    if result.is_failure:
        logger.debug(f"Failed to parse date: '{cleaned}'")
    return result


def _parse_iso_date(cleaned: str) -> ParsedDate:
    if not any(char.isdigit() for char in cleaned):
        return ParsedDate.failed()
    resolved = _coerce_timestamp(cleaned)
    if resolved is None:
        return ParsedDate.failed()
    return ParsedDate(resolved=resolved, has_time_component=True)


def _parse_numeric_date(cleaned: str) -> ParsedDate:
    parts = [part for part in _NUMERIC_SEPARATORS.split(cleaned) if part]
    if len(parts) < 3:
        return ParsedDate.failed()

    first, second, third = (_leading_int(part) for part in parts[:3])
    if first is None or second is None or third is None:
        return ParsedDate.failed()

    if len(parts[0]) == 4:
        # Year-first exports ("2024/01/15")
        resolved = _build_date(first, second, third)
    else:
        year = _expand_two_digit_year(third, SLASH_TWO_DIGIT_YEAR_PIVOT)
        # DD/MM/YYYY first, then MM/DD/YYYY
        resolved = _build_date(year, second, first) or _build_date(year, first, second)

    if resolved is None:
        return ParsedDate.failed()

    has_time = False
    if len(parts) >= 4 and ':' in parts[3]:
        clock = _parse_clock(parts[3])
        if clock is None:
            return ParsedDate.failed()
        resolved = datetime.combine(resolved.date(), clock)
        has_time = True

    return ParsedDate(resolved=resolved, has_time_component=has_time)


def _parse_named_month_date(cleaned: str) -> ParsedDate:
    parts = [part.rstrip('.') for part in cleaned.lower().replace(',', ' ').split()]
    if len(parts) < 2:
        return ParsedDate.failed()

    month = next((MONTH_LOOKUP[part] for part in parts if part in MONTH_LOOKUP), None)
    if month is None:
        return ParsedDate.failed()

    day: Optional[int] = None
    year: Optional[int] = None
    clock: Optional[time] = None

    for part in parts:
        if ':' in part:
            clock = _parse_clock(part)
            if clock is None:
                return ParsedDate.failed()
            continue
        match = _DAY_NUMBER.match(part)
        if not match:
            continue
        number = int(match.group(1))
        if 1 <= number <= 31 and day is None:
            day = number
        elif number >= MIN_FOUR_DIGIT_YEAR or 0 <= number <= 99:
            year = number

    if day is None:
        day = 1

    if year is None:
        # Leap year so 29 Feb survives until a year is known
        if day > calendar.monthrange(2000, month + 1)[1]:
            return ParsedDate.failed()
        return ParsedDate(
            has_time_component=clock is not None,
            needs_year_inference=True,
            month_day=(month, day),
            time_of_day=clock,
        )

    year = _expand_two_digit_year(year, NAMED_TWO_DIGIT_YEAR_PIVOT)
    resolved = _build_date(year, month + 1, day)
    if resolved is None:
        return ParsedDate.failed()
    if clock is not None:
        resolved = datetime.combine(resolved.date(), clock)
    return ParsedDate(resolved=resolved, has_time_component=clock is not None)


def _coerce_timestamp(text: str) -> Optional[datetime]:
    """Parse with pandas; aware results are converted to naive UTC."""
    try:
        timestamp = pd.to_datetime(text, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(timestamp):
        return None
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert('UTC').tz_localize(None)
    return timestamp.to_pydatetime()


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(0)) if match else None


def _expand_two_digit_year(year: int, pivot: int) -> int:
    if year < 100:
        return year + 2000 if year <= pivot else year + 1900
    return year


def _build_date(year: int, month: int, day: int) -> Optional[datetime]:
    """Month is 1-based here. None when the date does not exist."""
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _parse_clock(text: str) -> Optional[time]:
    match = _CLOCK.match(text)
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError:
        return None
