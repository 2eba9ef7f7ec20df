"""
Database module for SQLite operations.
Handles connection management and CRUD operations for transaction data.
"""

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Protocol

import pandas as pd

from ..config import CSV_EXPORT_HEADERS, DB_PATH
from ..exceptions import StorageError
from ..logger import setup_logger
from ..models import CanonicalTransaction, StoredTransaction

logger = setup_logger(__name__)


class TransactionStore(Protocol):
    """Persistence port for validated transactions."""

    def insert_transactions(self, records: Iterable[CanonicalTransaction]) -> list[StoredTransaction]:
        ...

    def get_all_transactions(self) -> pd.DataFrame:
        ...

    def delete_all_transactions(self) -> int:
        ...

    def get_transaction_count(self) -> int:
        ...


class SQLiteTransactionStore:
    """
    SQLite-backed transaction store.
    Assigns ids and creation/update timestamps on insert.
    """

    def __init__(self, db_path: str | Path = DB_PATH):
        self.db_path = Path(db_path)
        self.init_db()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Database error: {e}")
            raise StorageError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def init_db(self):
        """Initialize the database with the transactions table."""
        with self.get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    item TEXT NOT NULL,
                    game TEXT NOT NULL,
                    date TEXT NOT NULL,
                    price_cents INTEGER NOT NULL CHECK (price_cents >= 0),
                    type TEXT NOT NULL CHECK (type IN ('purchase', 'sale')),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_date
                ON transactions(date)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_game
                ON transactions(game)
            """)
            conn.commit()

    def insert_transactions(self, records: Iterable[CanonicalTransaction]) -> list[StoredTransaction]:
        """
        Bulk insert validated transactions.

        Args:
            records: Transactions produced by the import pipeline

        Returns:
            Stored transactions with their assigned ids and timestamps
        """
        now = datetime.now()
        stored = [
            StoredTransaction(id=str(uuid.uuid4()), transaction=record, created_at=now, updated_at=now)
            for record in records
        ]

        with self.get_connection() as conn:
            conn.executemany("""
                INSERT INTO transactions
                (id, item, game, date, price_cents, type, created_at, updated_at)
                VALUES (:id, :item, :game, :date, :price_cents, :type, :created_at, :updated_at)
            """, [s.to_dict() for s in stored])
            conn.commit()

        logger.info(f"Inserted {len(stored)} transactions")
        return stored

    def get_all_transactions(self) -> pd.DataFrame:
        """
        Retrieve all transactions as a DataFrame, newest first.

        Returns:
            DataFrame with all transaction records
        """
        with self.get_connection() as conn:
            df = pd.read_sql_query("""
                SELECT * FROM transactions
                ORDER BY date DESC, created_at DESC
            """, conn)

        # Convert datetime strings to datetime objects
        df['date'] = pd.to_datetime(df['date'])
        df['created_at'] = pd.to_datetime(df['created_at'])
        df['updated_at'] = pd.to_datetime(df['updated_at'])
        df['price_cents'] = df['price_cents'].astype(int)

        return df

    def delete_all_transactions(self) -> int:
        """Delete all transactions and return count of deleted rows."""
        with self.get_connection() as conn:
            cursor = conn.execute("DELETE FROM transactions")
            conn.commit()
            logger.info(f"Deleted {cursor.rowcount} transactions")
            return cursor.rowcount

    def get_transaction_count(self) -> int:
        """Get the total number of transactions in the database."""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT COUNT(*) FROM transactions")
            return cursor.fetchone()[0]

    def export_to_csv(self, filepath: str | Path) -> int:
        """
        Export all transactions to a CSV file that re-imports cleanly.

        Args:
            filepath: Path where CSV should be saved

        Returns:
            Number of records exported
        """
        df = self.get_all_transactions()

        if df.empty:
            logger.warning("No data to export")
            return 0

        filepath = Path(filepath)

        export_df = df[['item', 'game', 'date', 'price_cents', 'type']].copy()
        export_df['date'] = export_df['date'].dt.strftime('%Y-%m-%dT%H:%M:%S')
        export_df.columns = CSV_EXPORT_HEADERS

        export_df.to_csv(filepath, index=False, encoding='utf-8')

        logger.info(f"Exported {len(export_df)} records to {filepath.name}")
        return len(export_df)
