"""
API package - Data access layer (database) and REST API.
"""

from .database import SQLiteTransactionStore, TransactionStore

__all__ = [
    'SQLiteTransactionStore',
    'TransactionStore',
]
