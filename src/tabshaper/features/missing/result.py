from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from tabshaper.core.utils import is_numeric
from tabshaper.features.stats import describe_column


@dataclass(frozen=True, eq=False)
class ImputationResult:
    """
    Outcome of one imputation call.

    ``filled`` maps positional row indices to their new values; every other
    position of ``original`` is carried over untouched by ``imputed``.
    """

    column: str
    original: pd.Series
    method: str
    kind: str
    filled: Mapping[int, Any] = field(default_factory=dict)
    target: Optional[str] = None
    seed: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "original", self.original.copy())
        object.__setattr__(self, "filled", dict(self.filled))

    @property
    def is_numeric(self) -> bool:
        return is_numeric(self.original)

    @property
    def positions(self) -> np.ndarray:
        return np.array(sorted(self.filled), dtype=int)

    @property
    def n_filled(self) -> int:
        return len(self.filled)

    @property
    def imputed(self) -> pd.Series:
        out = self.original.astype(float) if self.is_numeric else self.original.copy()
        if self.filled:
            pos = self.positions
            out.iloc[pos] = [self.filled[p] for p in pos]
        return out

    def summary(self) -> pd.DataFrame:
        """
        Before/after statistics.

        Numeric columns give one row per state ("original", "imputation")
        with the descriptive statistics; categorical columns give a
        frequency table with counts and percentages per level.
        """
        if self.is_numeric:
            return pd.DataFrame({
                "original": describe_column(self.original, self.column).to_dict(),
                "imputation": describe_column(self.imputed, self.column).to_dict(),
            }).T

        before = self.original.value_counts(dropna=False)
        after = self.imputed.value_counts(dropna=False)
        table = pd.DataFrame({"original": before, "imputation": after}).fillna(0).astype(int)
        table["original_percent"] = (table["original"] / table["original"].sum() * 100).round(2)
        table["imputation_percent"] = (table["imputation"] / table["imputation"].sum() * 100).round(2)
        return table

    def plot(self, title: Optional[str] = None):
        from tabshaper.features.visualizer import plot_imputation
        return plot_imputation(self, title=title)
