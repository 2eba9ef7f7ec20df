"""
Pytest configuration and fixtures
"""
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def reference_date():
    """Fixed "now" so year inference is deterministic."""
    return datetime(2025, 6, 1, 12, 0)


@pytest.fixture
def steam_csv_text():
    """Marketplace export with synonym headers, newest first, no years."""
    return (
        "Item Name,Game Name,Acted On,Price in Cents,Type\n"
        "AK-47 | Redline,CS2,20 Jan,2850,Purchase\n"
        "AWP | Asiimov,CS2,15 Dec,9900,sale\n"
        "Dragonclaw Hook,Dota 2,3 Nov,45000,purchase\n"
    )


@pytest.fixture
def temp_db(tmp_path):
    """Path for a temporary SQLite database."""
    return tmp_path / "transactions.db"


@pytest.fixture
def store(temp_db):
    """SQLite store backed by a temporary database."""
    from tradeledger.api.database import SQLiteTransactionStore

    return SQLiteTransactionStore(temp_db)


@pytest.fixture
def test_data():
    """Stored transactions as returned by the store, newest first."""
    data = {
        "id": ["t1", "t2", "t3", "t4", "t5"],
        "item": ["AK-47 | Redline", "AWP | Asiimov", "AK-47 | Redline", "Dragonclaw Hook", "Sticker | Crown"],
        "game": ["CS2", "CS2", "CS2", "Dota 2", "CS2"],
        "date": pd.to_datetime([
            "2025-03-10 14:00:00",
            "2025-02-20 09:30:00",
            "2025-01-05 00:00:00",
            "2024-12-24 18:15:00",
            "2024-11-02 00:00:00",
        ]),
        "price_cents": [3400, 9900, 2850, 45000, 120],
        "type": ["sale", "purchase", "purchase", "purchase", "sale"],
    }
    return pd.DataFrame(data)
