"""
Metrics service - Centralized metrics calculations.
Provides consistent totals and summaries across frontends.
"""

from typing import Iterable, Optional

import pandas as pd

from ..logger import setup_logger
from ..metrics import (
    calculate_totals,
    get_game_summary,
    get_item_summary,
    get_monthly_summary,
)
from ..metrics.basic import SUMMARY_COLUMNS
from ..models import TransactionTotals

logger = setup_logger(__name__)


class MetricsService:
    """
    Service layer for metrics calculations.
    Provides a unified interface for all metric computations.
    """

    def calculate_all_metrics(self, df: pd.DataFrame) -> dict:
        """
        Calculate all available metrics for a dataset.

        Args:
            df: DataFrame with transaction data

        Returns:
            Dictionary with totals and per-game / per-month breakdowns
        """
        totals = self.calculate_totals(df)

        return {
            'transaction_count': len(df),
            'totals': totals.to_dict(),
            'games': self.get_game_metrics(df),
            'months': self.get_monthly_metrics(df),
        }

    def calculate_totals(self, df: pd.DataFrame, selected_ids: Optional[Iterable[str]] = None) -> TransactionTotals:
        """
        Totals for all transactions, or only the selected ones.

        Args:
            df: DataFrame with transaction data
            selected_ids: Transaction ids to include

        Returns:
            TransactionTotals in cents
        """
        return calculate_totals(df, selected_ids)

    def get_game_metrics(self, df: pd.DataFrame) -> list[dict]:
        """Per-game breakdown as records."""
        return _to_records(get_game_summary(df))

    def get_monthly_metrics(self, df: pd.DataFrame) -> list[dict]:
        """Per-month breakdown as records."""
        return _to_records(get_monthly_summary(df))

    def get_item_metrics(self, df: pd.DataFrame) -> list[dict]:
        """Per-item breakdown as records."""
        return _to_records(get_item_summary(df))


def _to_records(summary: pd.DataFrame) -> list[dict]:
    records = summary.to_dict('records')
    # numpy integers are not JSON serializable
    for record in records:
        for column in SUMMARY_COLUMNS:
            record[column] = int(record[column])
    return records
