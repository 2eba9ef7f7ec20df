"""
Transaction service - Centralized import and data operations with caching.
Provides a single source of truth for data access across frontends.
"""

import math
import time
from datetime import datetime
from typing import Optional

import pandas as pd

from ..api.database import TransactionStore
from ..config import DATA_CACHE_TTL_SECONDS, DEFAULT_PRICE_CEILING_EUROS
from ..logger import setup_logger, log_dataframe_stats
from ..models import ImportResult, TransactionFilters
from ..parsing import RowOrder, parse_transactions_csv

logger = setup_logger(__name__)


def apply_filters(df: pd.DataFrame, filters: TransactionFilters) -> pd.DataFrame:
    """
    Filter a transactions DataFrame.

    Args:
        df: DataFrame with transaction data
        filters: Filter criteria; unset criteria are ignored

    Returns:
        Filtered DataFrame
    """
    if df.empty:
        return df

    if filters.search_term:
        df = df[df['item'].str.contains(filters.search_term, case=False, regex=False)]

    if filters.game is not None:
        df = df[df['game'] == filters.game]

    if filters.type is not None:
        df = df[df['type'] == filters.type.value]

    # Price bounds are given in euros
    if filters.min_price is not None:
        df = df[df['price_cents'] >= filters.min_price * 100]
    if filters.max_price is not None:
        df = df[df['price_cents'] <= filters.max_price * 100]

    # Date bounds cover whole days
    if filters.start_date is not None:
        df = df[df['date'] >= pd.Timestamp(filters.start_date)]
    if filters.end_date is not None:
        df = df[df['date'] < pd.Timestamp(filters.end_date) + pd.Timedelta(days=1)]

    return df


class TransactionService:
    """
    Service layer for transaction imports and queries with built-in caching.
    The store is injected so the service holds no global state.
    """

    def __init__(self, store: TransactionStore, cache_ttl_seconds: int = DATA_CACHE_TTL_SECONDS):
        self.store = store
        self._df_cache: Optional[pd.DataFrame] = None
        self._cache_timestamp: Optional[float] = None
        self._cache_ttl_seconds = cache_ttl_seconds

    def import_csv_text(
        self,
        text: str,
        reference_date: Optional[datetime] = None,
        order: RowOrder = RowOrder.NEWEST_FIRST,
    ) -> ImportResult:
        """
        Parse a CSV export and store its valid transactions.

        Args:
            text: Full file content
            reference_date: Reference date for year inference
            order: Chronological direction of the rows

        Returns:
            ImportResult with the stored records and skipped rows

        Raises:
            CSVImportError: If the file is empty or has no valid rows
        """
        result = parse_transactions_csv(text, reference_date, order)
        self.store.insert_transactions(result.records)
        self.invalidate_cache()
        logger.info(f"Import finished: {result.summary_message()}")
        return result

    def get_data(self, force_refresh: bool = False) -> pd.DataFrame:
        """
        Get all transactions with caching.

        Args:
            force_refresh: Bypass cache and reload from the store

        Returns:
            DataFrame with all transactions, newest first
        """
        current_time = time.time()

        # Check if cache is valid
        if not force_refresh and self._df_cache is not None:
            if self._cache_timestamp and (current_time - self._cache_timestamp) < self._cache_ttl_seconds:
                logger.debug("Returning cached data")
                return self._df_cache

        logger.info("Loading transactions from store")
        df = self.store.get_all_transactions()
        log_dataframe_stats(df, logger, "Transactions")

        # Update cache
        self._df_cache = df
        self._cache_timestamp = current_time

        return df

    def get_filtered_data(self, filters: Optional[TransactionFilters] = None) -> pd.DataFrame:
        """
        Get filtered data based on criteria.

        Args:
            filters: Filter criteria (None returns everything)

        Returns:
            Filtered DataFrame
        """
        df = self.get_data()
        if filters is None or not filters.has_active_filters:
            return df
        return apply_filters(df, filters)

    def get_unique_games(self) -> list[str]:
        """Sorted list of games that have transactions."""
        df = self.get_data()
        if df.empty:
            return []
        return sorted(df['game'].unique().tolist())

    def get_price_bounds(self) -> tuple[int, int]:
        """
        Whole-euro price range of the stored transactions.

        Returns:
            Tuple of (min_euros, max_euros), max always above min
        """
        df = self.get_data()

        if df.empty:
            return 0, DEFAULT_PRICE_CEILING_EUROS

        min_bound = math.floor(df['price_cents'].min() / 100)
        max_bound = math.ceil(df['price_cents'].max() / 100)
        if max_bound <= min_bound:
            max_bound = min_bound + 1
        return int(min_bound), int(max_bound)

    def get_date_range(self) -> Optional[tuple[datetime, datetime]]:
        """
        Get the date range of available data.

        Returns:
            Tuple of (min_date, max_date), or None without data
        """
        df = self.get_data()

        if df.empty:
            return None

        return df['date'].min().to_pydatetime(), df['date'].max().to_pydatetime()

    def get_transaction_count(self) -> int:
        return self.store.get_transaction_count()

    def delete_all(self) -> int:
        """Delete every stored transaction."""
        deleted = self.store.delete_all_transactions()
        self.invalidate_cache()
        return deleted

    def invalidate_cache(self):
        """Clear the data cache."""
        logger.debug("Invalidating data cache")
        self._df_cache = None
        self._cache_timestamp = None
