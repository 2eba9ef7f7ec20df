"""
Basic metrics calculations for transaction data.
Includes totals, per-game, per-month and per-item summaries.
"""

from typing import Iterable, Optional

import pandas as pd

from ..logger import setup_logger
from ..models import TransactionTotals, TransactionType

logger = setup_logger(__name__)

SUMMARY_COLUMNS = ['transactions', 'spent_cents', 'gains_cents', 'net_cents']


def calculate_totals(df: pd.DataFrame, selected_ids: Optional[Iterable[str]] = None) -> TransactionTotals:
    """
    Calculate gains (sales), spending (purchases) and the net balance.

    Args:
        df: DataFrame with transaction data
        selected_ids: Restrict the totals to these transaction ids

    Returns:
        TransactionTotals in cents
    """
    if df.empty:
        return TransactionTotals()

    if selected_ids is not None:
        df = df[df['id'].isin(set(selected_ids))]

    gains = int(df.loc[df['type'] == TransactionType.SALE.value, 'price_cents'].sum())
    spent = int(df.loc[df['type'] == TransactionType.PURCHASE.value, 'price_cents'].sum())

    return TransactionTotals(gains=gains, spent=spent)


def _summarize_by(df: pd.DataFrame, keys: list[str]) -> pd.DataFrame:
    """Group by keys and sum purchases and sales separately."""
    if df.empty:
        return pd.DataFrame(columns=keys + SUMMARY_COLUMNS)

    work = df.assign(
        spent_cents=df['price_cents'].where(df['type'] == TransactionType.PURCHASE.value, 0),
        gains_cents=df['price_cents'].where(df['type'] == TransactionType.SALE.value, 0),
    )

    summary = work.groupby(keys).agg(
        transactions=('price_cents', 'count'),
        spent_cents=('spent_cents', 'sum'),
        gains_cents=('gains_cents', 'sum'),
    ).reset_index()
    summary['net_cents'] = summary['gains_cents'] - summary['spent_cents']

    logger.debug(f"Summarized {len(df)} transactions by {keys}")
    return summary


def get_game_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Generate a summary by game.

    Args:
        df: DataFrame with transaction data

    Returns:
        DataFrame with one row per game, most traded first
    """
    summary = _summarize_by(df, ['game'])
    if summary.empty:
        return summary
    return summary.sort_values(['transactions', 'game'], ascending=[False, True]).reset_index(drop=True)


def get_monthly_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Generate a summary by calendar month ("YYYY-MM").

    Args:
        df: DataFrame with transaction data

    Returns:
        DataFrame with one row per month, oldest first
    """
    if df.empty:
        return _summarize_by(df, ['month'])

    df = df.assign(month=df['date'].dt.to_period('M').astype(str))
    return _summarize_by(df, ['month']).sort_values('month').reset_index(drop=True)


def get_item_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Generate a summary per item, i.e. the realized profit of each skin.

    Args:
        df: DataFrame with transaction data

    Returns:
        DataFrame with one row per (item, game), best net first
    """
    summary = _summarize_by(df, ['item', 'game'])
    if summary.empty:
        return summary
    return summary.sort_values(['net_cents', 'item'], ascending=[False, True]).reset_index(drop=True)
