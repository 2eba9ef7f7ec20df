"""
Services package - Business logic layer.
"""

from .transaction_service import TransactionService, apply_filters
from .metrics_service import MetricsService

__all__ = ['TransactionService', 'MetricsService', 'apply_filters']
