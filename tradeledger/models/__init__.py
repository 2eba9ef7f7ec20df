"""
Models package - Data models and type definitions.
"""

from .transaction import (
    CanonicalTransaction,
    DiscardCategory,
    DiscardReason,
    ImportResult,
    ParsedDate,
    StoredTransaction,
    TransactionFilters,
    TransactionTotals,
    TransactionType,
)

__all__ = [
    'CanonicalTransaction',
    'DiscardCategory',
    'DiscardReason',
    'ImportResult',
    'ParsedDate',
    'StoredTransaction',
    'TransactionFilters',
    'TransactionTotals',
    'TransactionType',
]
