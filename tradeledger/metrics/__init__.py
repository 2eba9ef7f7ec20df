"""Metrics package for transaction data analysis."""

from .basic import (
    calculate_totals,
    get_game_summary,
    get_monthly_summary,
    get_item_summary,
)
