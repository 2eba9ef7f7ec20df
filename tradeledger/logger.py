"""
Logging setup shared by every tradeledger module.
Each logger writes DEBUG detail to LOG_DIR/tradeledger.log and INFO to stdout.
"""

import logging
import sys

from .config import LOG_DIR, LOG_LEVEL, LOG_FORMAT

LOG_FILE = LOG_DIR / "tradeledger.log"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logger(name: str) -> logging.Logger:
    """
    Get a module logger with file and console output.

    Calling it again for the same name replaces the handlers instead of
    stacking duplicates.

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.handlers.clear()

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.addHandler(_handler(logging.FileHandler(LOG_FILE, encoding="utf-8"), logging.DEBUG))
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), logging.INFO))

    return logger


def log_dataframe_stats(df, logger: logging.Logger, name: str = "Transactions"):
    """Log size, games, type split and date span of a transactions DataFrame."""
    if df.empty:
        logger.warning(f"{name}: no rows")
        return

    type_counts = df['type'].value_counts().to_dict()
    logger.info(
        f"{name}: {len(df)} rows across {df['game'].nunique()} game(s), "
        f"{type_counts.get('purchase', 0)} purchase(s) / {type_counts.get('sale', 0)} sale(s), "
        f"{df['date'].min():%Y-%m-%d} to {df['date'].max():%Y-%m-%d}"
    )
