"""
Configuration constants for tradeledger.
Centralized configuration for header synonyms, date rules, storage and logging.
"""

import os
from pathlib import Path
from typing import Dict, List

# Database
DB_PATH = Path(os.environ.get(
    "TRADELEDGER_DB_PATH",
    Path(__file__).parent.parent / "data" / "transactions.db",
))

# CSV header normalization map (lower-cased, trimmed header -> field name)
CSV_HEADER_MAP: Dict[str, str] = {
    "item name": "item",
    "game name": "game",
    "acted on": "date",
    "price in cents": "price_cents",
    "type": "type",
}

# Header line written by CSV exports, re-importable through CSV_HEADER_MAP
CSV_EXPORT_HEADERS: List[str] = ["Item Name", "Game Name", "Acted On", "Price in Cents", "Type"]

# Fields every row must carry (price is checked separately)
REQUIRED_FIELDS: List[str] = ["item", "game", "date", "type"]

# Month names (0-indexed), Portuguese and English
PT_MONTHS: Dict[str, int] = {
    'jan': 0, 'janeiro': 0,
    'fev': 1, 'fevereiro': 1,
    'mar': 2, 'março': 2,
    'abr': 3, 'abril': 3,
    'mai': 4, 'maio': 4,
    'jun': 5, 'junho': 5,
    'jul': 6, 'julho': 6,
    'ago': 7, 'agosto': 7,
    'set': 8, 'setembro': 8,
    'out': 9, 'outubro': 9,
    'nov': 10, 'novembro': 10,
    'dez': 11, 'dezembro': 11,
}

EN_MONTHS: Dict[str, int] = {
    'jan': 0, 'january': 0,
    'feb': 1, 'february': 1,
    'mar': 2, 'march': 2,
    'apr': 3, 'april': 3,
    'may': 4,
    'jun': 5, 'june': 5,
    'jul': 6, 'july': 6,
    'aug': 7, 'august': 7,
    'sep': 8, 'september': 8,
    'oct': 9, 'october': 9,
    'nov': 10, 'november': 10,
    'dec': 11, 'december': 11,
}

MONTH_LOOKUP: Dict[str, int] = {**EN_MONTHS, **PT_MONTHS}

# Year Rules
SLASH_TWO_DIGIT_YEAR_PIVOT = 50  # DD/MM/YY: <= 50 -> 20YY, else 19YY
NAMED_TWO_DIGIT_YEAR_PIVOT = 30  # "20 Aug 24": <= 30 -> 20YY, else 19YY
MIN_FOUR_DIGIT_YEAR = 1900

# Data Service
DATA_CACHE_TTL_SECONDS = 300  # 5 minutes cache
DEFAULT_PRICE_CEILING_EUROS = 1000  # Price slider upper bound when no data

# API
API_VERSION = "v1"
API_HOST = os.environ.get("TRADELEDGER_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("TRADELEDGER_API_PORT", "8000"))
API_DEFAULT_LIMIT = 100
API_MAX_LIMIT = 5000

# Logging
LOG_DIR = Path(os.environ.get("TRADELEDGER_LOG_DIR", Path(__file__).parent.parent / "logs"))
LOG_LEVEL = os.environ.get("TRADELEDGER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
