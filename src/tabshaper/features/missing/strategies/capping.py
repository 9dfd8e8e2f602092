from __future__ import annotations
from typing import Dict, Any, Tuple
import numpy as np
import pandas as pd

from tabshaper.core.interfaces import ImputationStrategy


class CappingStrategy(ImputationStrategy):
    """
    Cap outliers at sample percentiles.

    Masked values above the median take the upper percentile (95th by
    default), the others the lower one (5th). Only masked rows are touched.
    """

    methods = ("capping",)
    kinds = {"capping": ("numeric",)}
    scopes = ("outlier",)

    def __init__(self, column: str, plan: Dict[str, Any]):
        super().__init__(column, plan)
        self.probs: Tuple[float, float] = tuple(plan.get("capping_quantiles", (0.05, 0.95)))
        self.caps_: Tuple[float, float] = (np.nan, np.nan)
        self.median_: float = np.nan

    def fit(self, X: pd.DataFrame, mask: pd.Series) -> "CappingStrategy":
        values = X[self.column].astype(float).dropna().to_numpy()
        if values.size:
            lo, hi = np.quantile(values, self.probs)
            self.caps_ = (float(lo), float(hi))
            self.median_ = float(np.median(values))
        return self

    def predict(self, X: pd.DataFrame, mask: pd.Series) -> pd.Series:
        rows = X.index[mask.to_numpy()]
        values = X.loc[rows, self.column].astype(float).to_numpy()
        capped = np.where(values > self.median_, self.caps_[1], self.caps_[0])
        return pd.Series(capped, index=rows, dtype=object)
