"""
Import pipeline for marketplace transaction exports.
Sequences validation, year inference and record construction over a file.
"""

from datetime import datetime
from typing import Optional, Sequence

from ..exceptions import EmptyFileError, NoValidRowsError
from ..logger import setup_logger
from ..models import CanonicalTransaction, DiscardReason, ImportResult
from .validator import PendingRow, RawRow, finalize_row, prepare_row
from .year_inference import RowOrder, infer_years

logger = setup_logger(__name__)


def validate_and_convert(
    rows: Sequence[RawRow],
    reference_date: Optional[datetime] = None,
    order: RowOrder = RowOrder.NEWEST_FIRST,
) -> ImportResult:
    """
    Validate header-normalized rows and convert them to transactions.

    Rows that fail validation are reported in `discards`, never raised.
    The function keeps no state between calls.

    Args:
        rows: Rows in file order, keys already normalized
        reference_date: "Now" for year inference (defaults to now)
        order: Chronological direction of the rows

    Returns:
        ImportResult with records in file order and discards by row index

    Raises:
        EmptyFileError: If rows is empty
        NoValidRowsError: If no row survives validation
    """
    if not rows:
        raise EmptyFileError()

    if reference_date is None:
        reference_date = datetime.now()

    pending: list[PendingRow] = []
    discards: list[DiscardReason] = []

    # First pass: required fields and dates
    for index, row in enumerate(rows, start=1):
        outcome = prepare_row(row, index)
        if isinstance(outcome, DiscardReason):
            discards.append(outcome)
        else:
            pending.append(outcome)

    # Year inference over the surviving rows, in file order
    inferred = infer_years([p.parsed_date for p in pending], reference_date, order)

    # Second pass: prices, types, records
    records: list[CanonicalTransaction] = []
    for row, resolved in zip(pending, inferred):
        outcome = finalize_row(row, resolved)
        if isinstance(outcome, DiscardReason):
            discards.append(outcome)
        else:
            records.append(outcome)

    discards.sort(key=lambda d: d.row_index)
    result = ImportResult(records=records, discards=discards)

    if not records:
        logger.error(f"No valid rows in {len(rows)} row(s)")
        raise NoValidRowsError(discards)

    logger.info(f"Validated {len(rows)} row(s): {result.summary_message()}")
    return result
