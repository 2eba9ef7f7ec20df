"""
Unit tests for TransactionService
"""
from datetime import date, datetime
from unittest.mock import Mock, patch

import pandas as pd
import pytest

from tradeledger.exceptions import EmptyFileError, NoValidRowsError
from tradeledger.models import TransactionFilters, TransactionType
from tradeledger.services import TransactionService, apply_filters


@pytest.mark.unit
class TestTransactionServiceCache:
    """Test TransactionService caching against a mocked store."""

    @pytest.fixture
    def mock_store(self, test_data):
        store = Mock()
        store.get_all_transactions.return_value = test_data
        return store

    def test_get_data_cached(self, mock_store, test_data):
        """Test data is cached after first fetch."""
        service = TransactionService(mock_store)

        result1 = service.get_data()
        result2 = service.get_data()

        mock_store.get_all_transactions.assert_called_once()
        pd.testing.assert_frame_equal(result1, result2)

    def test_get_data_force_refresh(self, mock_store):
        """Test force_refresh bypasses the cache."""
        service = TransactionService(mock_store)

        service.get_data()
        service.get_data(force_refresh=True)

        assert mock_store.get_all_transactions.call_count == 2

    def test_cache_expires(self, mock_store):
        """Test a zero TTL always reloads."""
        service = TransactionService(mock_store, cache_ttl_seconds=0)

        service.get_data()
        service.get_data()

        assert mock_store.get_all_transactions.call_count == 2

    def test_cache_ttl(self, mock_store):
        """Test cached data is reused until the TTL elapses."""
        service = TransactionService(mock_store, cache_ttl_seconds=300)

        with patch("tradeledger.services.transaction_service.time") as mock_time:
            mock_time.time.side_effect = [1000.0, 1100.0, 1400.0]
            service.get_data()
            service.get_data()
            service.get_data()

        assert mock_store.get_all_transactions.call_count == 2

    def test_transaction_count_reads_store(self, mock_store):
        """Test the count comes straight from the store."""
        mock_store.get_transaction_count.return_value = 5

        assert TransactionService(mock_store).get_transaction_count() == 5

    def test_delete_invalidates_cache(self, mock_store):
        """Test deleting clears the cache."""
        mock_store.delete_all_transactions.return_value = 5
        service = TransactionService(mock_store)
        service.get_data()

        assert service.delete_all() == 5
        service.get_data()

        assert mock_store.get_all_transactions.call_count == 2

    def test_import_stores_records(self, mock_store, steam_csv_text, reference_date):
        """Test valid records are handed to the store."""
        service = TransactionService(mock_store)
        service.get_data()

        result = service.import_csv_text(steam_csv_text, reference_date)

        mock_store.insert_transactions.assert_called_once_with(result.records)
        assert result.imported_count == 3
        service.get_data()
        assert mock_store.get_all_transactions.call_count == 2

    def test_failed_import_stores_nothing(self, mock_store):
        """Test fatal import errors propagate before storage."""
        service = TransactionService(mock_store)

        with pytest.raises(EmptyFileError):
            service.import_csv_text("")
        with pytest.raises(NoValidRowsError):
            service.import_csv_text("Item Name,Game Name,Acted On,Price in Cents,Type\n")

        mock_store.insert_transactions.assert_not_called()


@pytest.mark.unit
class TestTransactionServiceQueries:
    """Test query helpers."""

    @pytest.fixture
    def service(self, test_data):
        store = Mock()
        store.get_all_transactions.return_value = test_data
        return TransactionService(store)

    @pytest.fixture
    def empty_service(self):
        store = Mock()
        store.get_all_transactions.return_value = pd.DataFrame(
            columns=["id", "item", "game", "date", "price_cents", "type"]
        )
        return TransactionService(store)

    def test_unique_games(self, service):
        """Test games are unique and sorted."""
        assert service.get_unique_games() == ["CS2", "Dota 2"]

    def test_price_bounds(self, service):
        """Test bounds are whole euros around the data."""
        assert service.get_price_bounds() == (1, 450)

    def test_price_bounds_empty(self, empty_service):
        """Test default bounds without data."""
        assert empty_service.get_price_bounds() == (0, 1000)
        assert empty_service.get_unique_games() == []

    def test_date_range(self, service):
        """Test oldest and newest dates."""
        assert service.get_date_range() == (datetime(2024, 11, 2), datetime(2025, 3, 10, 14, 0))

    def test_date_range_empty(self, empty_service):
        assert empty_service.get_date_range() is None

    def test_filtered_data_without_filters(self, service, test_data):
        """Test no filters returns everything."""
        assert len(service.get_filtered_data()) == len(test_data)
        assert len(service.get_filtered_data(TransactionFilters())) == len(test_data)

    def test_filtered_data(self, service):
        """Test filters are applied to the cached data."""
        df = service.get_filtered_data(TransactionFilters(game="Dota 2"))

        assert df["id"].tolist() == ["t4"]


@pytest.mark.unit
class TestApplyFilters:
    """Test apply_filters."""

    def test_search_is_case_insensitive(self, test_data):
        df = apply_filters(test_data, TransactionFilters(search_term="redline"))

        assert df["id"].tolist() == ["t1", "t3"]

    def test_search_is_literal(self, test_data):
        df = apply_filters(test_data, TransactionFilters(search_term="AWP |"))

        assert df["id"].tolist() == ["t2"]

    def test_type(self, test_data):
        df = apply_filters(test_data, TransactionFilters(type=TransactionType.SALE))

        assert df["id"].tolist() == ["t1", "t5"]

    def test_price_bounds_in_euros(self, test_data):
        df = apply_filters(test_data, TransactionFilters(min_price=28.5, max_price=99))

        assert df["id"].tolist() == ["t1", "t2", "t3"]

    def test_date_bounds_are_inclusive_days(self, test_data):
        filters = TransactionFilters(start_date=date(2024, 12, 24), end_date=date(2025, 3, 10))

        df = apply_filters(test_data, filters)

        assert df["id"].tolist() == ["t1", "t2", "t3", "t4"]

    def test_combined(self, test_data):
        filters = TransactionFilters(game="CS2", type=TransactionType.PURCHASE, max_price=50)

        assert apply_filters(test_data, filters)["id"].tolist() == ["t3"]

    def test_empty_frame(self):
        empty = pd.DataFrame()

        assert apply_filters(empty, TransactionFilters(game="CS2")).empty
