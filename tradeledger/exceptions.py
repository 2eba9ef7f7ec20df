"""tradeledger exception hierarchy."""

from __future__ import annotations


class TradeLedgerError(Exception):
    """Base exception for all tradeledger errors."""


class CSVImportError(TradeLedgerError, ValueError):
    """A CSV import failed as a whole."""


class EmptyFileError(CSVImportError):
    """The file (or row set) handed to the pipeline was empty."""

    def __init__(self, message: str = "CSV file is empty") -> None:
        super().__init__(message)


class NoValidRowsError(CSVImportError):
    """The file had rows but none survived validation."""

    def __init__(self, discards: list | None = None) -> None:
        self.discards = discards or []
        message = "No valid transactions found in the CSV file"
        if self.discards:
            message += f" ({len(self.discards)} row(s) skipped)"
        super().__init__(message)


class CSVFormatError(CSVImportError):
    """The CSV text could not be tokenized into rows."""


class StorageError(TradeLedgerError):
    """A persistence operation failed."""
