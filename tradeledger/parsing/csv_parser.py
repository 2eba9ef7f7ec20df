"""
CSV parsing module for marketplace transaction exports.
Handles tokenizing, header normalization and the file-level import entry points.
"""

import io
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from ..exceptions import CSVFormatError, EmptyFileError, NoValidRowsError
from ..logger import setup_logger
from ..models import ImportResult
from .headers import normalize_header
from .pipeline import validate_and_convert
from .year_inference import RowOrder

logger = setup_logger(__name__)


def read_csv_rows(text: str) -> list[dict[str, Optional[Any]]]:
    """
    Tokenize CSV text into rows keyed by normalized header.

    Cells are kept as text; empty cells are "" and cells missing from short
    rows are None. Blank lines are skipped.

    Args:
        text: Full file content, decoded

    Returns:
        List of row mappings in file order (header excluded)

    Raises:
        EmptyFileError: If there is no content at all
        CSVFormatError: If the text cannot be read as CSV
    """
    text = text.lstrip('\ufeff')
    if not text.strip():
        raise EmptyFileError()

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
        )
        logger.debug(f"CSV loaded: {len(df)} rows, {len(df.columns)} columns")
    except pd.errors.EmptyDataError as e:
        raise EmptyFileError() from e
    except (pd.errors.ParserError, ValueError) as e:
        logger.error(f"Failed to read CSV: {e}")
        raise CSVFormatError(f"Invalid CSV file: {e}") from e

    df.columns = [normalize_header(str(column)) for column in df.columns]

    duplicated = df.columns.duplicated()
    if duplicated.any():
        logger.warning(f"Ignoring duplicate columns: {list(df.columns[duplicated])}")
        df = df.loc[:, ~duplicated]

    df = df.astype(object).where(df.notna(), None)
    return df.to_dict('records')


def parse_transactions_csv(
    text: str,
    reference_date: Optional[datetime] = None,
    order: RowOrder = RowOrder.NEWEST_FIRST,
) -> ImportResult:
    """
    Parse a marketplace export into validated transactions.

    Args:
        text: Full file content, decoded as UTF-8
        reference_date: Reference date for year inference (defaults to now)
        order: Chronological direction of the rows

    Returns:
        ImportResult with records and per-row discards

    Raises:
        EmptyFileError: If the file has no content
        NoValidRowsError: If the file has a header but no usable rows
        CSVFormatError: If the text is not valid CSV
    """
    rows = read_csv_rows(text)
    if not rows:
        logger.error("CSV has a header but no data rows")
        raise NoValidRowsError()

    return validate_and_convert(rows, reference_date, order)


def parse_csv_file(
    filepath: str | Path,
    reference_date: Optional[datetime] = None,
    order: RowOrder = RowOrder.NEWEST_FIRST,
) -> ImportResult:
    """
    Read a CSV export from disk and parse it.

    Args:
        filepath: Path to the CSV file
        reference_date: Reference date for year inference (defaults to now)
        order: Chronological direction of the rows

    Returns:
        ImportResult with records and per-row discards

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        CSVImportError: If the file cannot be imported
    """
    filepath = Path(filepath)

    if not filepath.exists():
        logger.error(f"CSV file not found: {filepath}")
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    logger.info(f"Parsing CSV file: {filepath.name}")
    text = filepath.read_text(encoding='utf-8-sig')
    return parse_transactions_csv(text, reference_date, order)
