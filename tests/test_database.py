"""
Unit tests for the SQLite transaction store
"""
import sqlite3
from datetime import datetime

import pandas as pd
import pytest

from tradeledger.exceptions import StorageError
from tradeledger.models import CanonicalTransaction, TransactionType
from tradeledger.parsing import parse_csv_file


@pytest.fixture
def transactions():
    return [
        CanonicalTransaction("AK-47 | Redline", "CS2", datetime(2025, 1, 20), 2850, TransactionType.PURCHASE),
        CanonicalTransaction("AWP | Asiimov", "CS2", datetime(2025, 3, 1, 9, 15), 9900, TransactionType.SALE),
        CanonicalTransaction("Dragonclaw Hook", "Dota 2", datetime(2024, 11, 3), 45000, TransactionType.PURCHASE),
    ]


@pytest.mark.unit
class TestSQLiteTransactionStore:
    """Test SQLiteTransactionStore CRUD operations."""

    def test_init_creates_table(self, store, temp_db):
        """Test the transactions table exists after init."""
        conn = sqlite3.connect(temp_db)
        tables = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        conn.close()

        assert ("transactions",) in tables

    def test_insert_assigns_ids_and_timestamps(self, store, transactions):
        """Test storage-assigned fields are set."""
        stored = store.insert_transactions(transactions)

        assert len(stored) == 3
        assert len({s.id for s in stored}) == 3
        assert all(s.created_at == s.updated_at for s in stored)
        assert stored[0].transaction == transactions[0]

    def test_get_all_newest_first(self, store, transactions):
        """Test rows come back ordered by date descending."""
        store.insert_transactions(transactions)

        df = store.get_all_transactions()

        assert df["item"].tolist() == ["AWP | Asiimov", "AK-47 | Redline", "Dragonclaw Hook"]
        assert pd.api.types.is_datetime64_any_dtype(df["date"])
        assert df.iloc[0]["date"] == pd.Timestamp("2025-03-01 09:15:00")
        assert df["price_cents"].tolist() == [9900, 2850, 45000]

    def test_get_all_empty(self, store):
        """Test empty store returns an empty frame with the expected columns."""
        df = store.get_all_transactions()

        assert df.empty
        assert {"id", "item", "game", "date", "price_cents", "type"} <= set(df.columns)

    def test_count_and_delete(self, store, transactions):
        """Test counting and deleting all rows."""
        store.insert_transactions(transactions)

        assert store.get_transaction_count() == 3
        assert store.delete_all_transactions() == 3
        assert store.get_transaction_count() == 0

    def test_insert_nothing(self, store):
        """Test inserting an empty batch is a no-op."""
        assert store.insert_transactions([]) == []
        assert store.get_transaction_count() == 0

    def test_storage_errors_are_wrapped(self, store):
        """Test sqlite errors surface as StorageError."""
        with pytest.raises(StorageError):
            with store.get_connection() as conn:
                conn.execute("SELECT * FROM missing_table")


@pytest.mark.unit
class TestExportToCsv:
    """Test CSV export."""

    def test_export_reimports(self, store, transactions, tmp_path, reference_date):
        """Test an export parses back to the same transactions."""
        store.insert_transactions(transactions)
        csv_path = tmp_path / "export.csv"

        count = store.export_to_csv(csv_path)
        result = parse_csv_file(csv_path, reference_date)

        assert count == 3
        assert sorted(result.records, key=lambda r: r.date) == sorted(transactions, key=lambda r: r.date)

    def test_export_header(self, store, transactions, tmp_path):
        """Test the export uses the marketplace header names."""
        store.insert_transactions(transactions)
        csv_path = tmp_path / "export.csv"

        store.export_to_csv(csv_path)

        assert csv_path.read_text(encoding="utf-8").splitlines()[0] == "Item Name,Game Name,Acted On,Price in Cents,Type"

    def test_export_empty(self, store, tmp_path):
        """Test nothing is written without data."""
        csv_path = tmp_path / "export.csv"

        assert store.export_to_csv(csv_path) == 0
        assert not csv_path.exists()
