"""
Row validation for marketplace CSV exports.
Turns one header-normalized row into a CanonicalTransaction or a DiscardReason.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..config import REQUIRED_FIELDS
from ..logger import setup_logger
from ..models import (
    CanonicalTransaction,
    DiscardCategory,
    DiscardReason,
    ParsedDate,
    TransactionType,
)
from .date_parser import parse_transaction_date
from .price_parser import parse_price_to_cents
from .year_inference import infer_years

logger = setup_logger(__name__)

RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class PendingRow:
    """A row that passed the first validation pass and awaits its final date."""
    row_index: int
    row: RawRow
    parsed_date: ParsedDate


def cell_text(value: Any) -> str:
    """Cell value as trimmed text; absent and NaN cells are empty."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def find_missing_field(row: RawRow) -> Optional[str]:
    """Return the first required field that is absent or blank."""
    for field_name in REQUIRED_FIELDS:
        if not cell_text(row.get(field_name)):
            return field_name
    return None


def prepare_row(row: RawRow, row_index: int) -> Union[PendingRow, DiscardReason]:
    """
    First pass: check required fields and parse the date.

    Args:
        row: Header-normalized row
        row_index: 1-based row number in the file

    Returns:
        PendingRow, or DiscardReason for missing fields / unparseable dates
    """
    missing = find_missing_field(row)
    if missing is not None:
        return _discard(row_index, DiscardCategory.MISSING_REQUIRED_FIELD, f"missing '{missing}'")

    date_text = cell_text(row.get('date'))
    parsed = parse_transaction_date(date_text)
    if parsed.is_failure:
        return _discard(row_index, DiscardCategory.UNPARSEABLE_DATE, date_text)

    return PendingRow(row_index=row_index, row=row, parsed_date=parsed)


def finalize_row(pending: PendingRow, resolved_date: datetime) -> Union[CanonicalTransaction, DiscardReason]:
    """
    Second pass: parse the price, validate the type and build the record.

    Args:
        pending: Row returned by prepare_row
        resolved_date: Date for this row after year inference

    Returns:
        CanonicalTransaction, or DiscardReason for bad prices / types
    """
    row = pending.row

    price_cents = parse_price_to_cents(row.get('price'), row.get('price_cents'))
    if price_cents is None or price_cents < 0:
        detail = cell_text(row.get('price')) or cell_text(row.get('price_cents'))
        return _discard(pending.row_index, DiscardCategory.UNPARSEABLE_PRICE, detail)

    type_text = cell_text(row.get('type')).lower()
    try:
        transaction_type = TransactionType(type_text)
    except ValueError:
        return _discard(pending.row_index, DiscardCategory.INVALID_TYPE, cell_text(row.get('type')))

    return CanonicalTransaction(
        item=cell_text(row.get('item')),
        game=cell_text(row.get('game')),
        date=resolved_date,
        price_cents=price_cents,
        type=transaction_type,
    )


def validate_row(
    row: RawRow,
    row_index: int = 1,
    reference_date: Optional[datetime] = None,
) -> Union[CanonicalTransaction, DiscardReason]:
    """
    Validate a single row on its own.

    A year-less date gets the reference year, or the previous one if that
    would put it in the future.
    """
    pending = prepare_row(row, row_index)
    if isinstance(pending, DiscardReason):
        return pending
    resolved = infer_years([pending.parsed_date], reference_date)[0]
    return finalize_row(pending, resolved)


def _discard(row_index: int, reason: DiscardCategory, detail: str) -> DiscardReason:
    logger.warning(f"Row {row_index} skipped ({reason.value}): {detail}")
    return DiscardReason(row_index=row_index, reason=reason, detail=detail)
