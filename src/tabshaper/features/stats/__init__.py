"""Descriptive statistics and skewness detection."""
from tabshaper.features.stats.column_stats import (
    ColumnStats,
    describe,
    describe_column,
    find_skewness,
    get_mode,
    skewness,
)

__all__ = [
    "ColumnStats",
    "describe",
    "describe_column",
    "find_skewness",
    "get_mode",
    "skewness",
]
