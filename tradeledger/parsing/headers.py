"""
Header normalization for marketplace CSV exports.
Maps the different column-name spellings onto internal field names.
"""

from ..config import CSV_HEADER_MAP


def normalize_header(header: str) -> str:
    """
    Normalize a CSV header to an internal field name.

    Unknown headers are returned lower-cased and trimmed so they can still be
    told apart, but nothing downstream reads them.

    Args:
        header: Raw header text, e.g. "Item Name"

    Returns:
        Field name such as "item", or the cleaned header itself
    """
    normalized = header.strip().lower()
    return CSV_HEADER_MAP.get(normalized, normalized)
