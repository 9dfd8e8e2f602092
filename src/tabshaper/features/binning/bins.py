from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

MISSING_LEVEL = "<NA>"


def _fmt(x: float, digits: int) -> str:
    return f"{x:.{digits}g}"


def interval_labels(breaks: Sequence[float]) -> Tuple[str, ...]:
    """``[a,b]`` for the first interval, ``(a,b]`` for the rest."""
    breaks = list(breaks)
    if len(breaks) == 1:
        return (f"[{_fmt(breaks[0], 6)},{_fmt(breaks[0], 6)}]",)
    for digits in (6, 10, 15):
        labels = tuple(
            ("[" if i == 0 else "(") + f"{_fmt(lo, digits)},{_fmt(hi, digits)}]"
            for i, (lo, hi) in enumerate(zip(breaks[:-1], breaks[1:]))
        )
        if len(set(labels)) == len(labels):
            return labels
    return labels


def cut(values: pd.Series, breaks: np.ndarray, labels: Sequence[str]) -> pd.Series:
    """
    Assign values to right-closed intervals; the lowest interval includes its
    left edge so a value sitting on a break falls into the lower interval.
    Values outside ``[breaks[0], breaks[-1]]`` and missing values map to NaN.
    """
    values = pd.to_numeric(values, errors="coerce")
    dtype = pd.CategoricalDtype(categories=list(labels), ordered=True)
    if len(breaks) == 1:
        # a single point: every value equal to it is in the only interval
        codes = np.where(values.to_numpy(dtype=float, na_value=np.nan) == breaks[0], 0, -1)
        return pd.Series(pd.Categorical.from_codes(codes, dtype=dtype), index=values.index, name=values.name)
    binned = pd.cut(values, bins=breaks, labels=list(labels), right=True, include_lowest=True, ordered=True)
    return binned.astype(dtype)


@dataclass(frozen=True, eq=False)
class Bins:
    """
    Ordered partition of a numeric column into contiguous intervals.

    ``breaks`` holds K+1 increasing edges (a single edge for a constant
    column) and ``labels`` the K interval labels. ``binned`` is the column
    mapped to an ordered categorical. Optimal (supervised) bins also carry
    per-interval weight of evidence, the total information value, the KS
    statistic and the full IV table.
    """

    column: str
    type: str
    breaks: np.ndarray
    labels: Tuple[str, ...]
    binned: pd.Series
    n_bins: Optional[int] = None
    target: Optional[str] = None
    woe: Optional[np.ndarray] = None
    iv: Optional[float] = None
    ks: Optional[float] = None
    iv_table: Optional[pd.DataFrame] = None

    def __post_init__(self):
        object.__setattr__(self, "breaks", np.asarray(self.breaks, dtype=float).copy())
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "binned", self.binned.copy())
        if self.iv_table is not None:
            object.__setattr__(self, "iv_table", self.iv_table.copy())

    @property
    def n_intervals(self) -> int:
        return len(self.labels)

    @property
    def is_optimal(self) -> bool:
        return self.iv is not None

    def extract(self) -> pd.Series:
        """The binned column as an ordered categorical Series."""
        return self.binned.copy()

    def apply(self, values: pd.Series) -> pd.Series:
        """Bin new values with the learned breaks."""
        return cut(pd.Series(values), self.breaks, self.labels)

    def summary(self) -> pd.DataFrame:
        """Frequency and ratio per level; missing values get their own row."""
        freq = self.binned.value_counts(sort=False).reindex(list(self.labels), fill_value=0)
        levels = list(self.labels)
        counts = freq.to_list()
        n_missing = int(self.binned.isna().sum())
        if n_missing:
            levels.append(MISSING_LEVEL)
            counts.append(n_missing)
        total = sum(counts)
        out = pd.DataFrame({"levels": levels, "freq": counts})
        out["rate"] = out["freq"] / total if total else 0.0
        return out

    def plot(self, title: Optional[str] = None):
        from tabshaper.features.visualizer import plot_bins
        return plot_bins(self, title=title)
