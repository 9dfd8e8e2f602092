from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd

from tabshaper.core.exceptions import UnsupportedMethodError
from tabshaper.core.utils import LoggerFactory, is_numeric

_DEFAULT_COEF = {"iqr": 1.5, "zscore": 3.0}


class OutlierDetector:
    """
    Locate outlying values of a numeric column.

    Rules
    -----
    iqr : outside ``[Q1 - coef*IQR, Q3 + coef*IQR]`` (coef defaults to 1.5)
    zscore : outside ``mean +/- coef*sd`` (coef defaults to 3)

    Quantiles use linear interpolation. Missing values are never outliers.
    """

    def __init__(self, rule: str = "iqr", coef: Optional[float] = None):
        rule = str(rule).lower()
        if rule not in _DEFAULT_COEF:
            raise UnsupportedMethodError(f"Unknown outlier rule '{rule}'")
        self.rule = rule
        self.coef = float(coef) if coef is not None else _DEFAULT_COEF[rule]
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def _values(self, series: pd.Series) -> np.ndarray:
        if not is_numeric(series):
            raise UnsupportedMethodError(
                f"Outlier detection needs a numeric column, '{series.name}' is {series.dtype}"
            )
        return series.to_numpy(dtype=float, na_value=np.nan)

    def bounds(self, series: pd.Series) -> Tuple[float, float]:
        values = self._values(series)
        observed = values[~np.isnan(values)]
        if observed.size == 0:
            return float("nan"), float("nan")
        if self.rule == "iqr":
            q1, q3 = np.quantile(observed, [0.25, 0.75])
            whisker = self.coef * (q3 - q1)
            return float(q1 - whisker), float(q3 + whisker)
        mean = observed.mean()
        sd = observed.std(ddof=1) if observed.size > 1 else 0.0
        return float(mean - self.coef * sd), float(mean + self.coef * sd)

    def mask(self, series: pd.Series) -> np.ndarray:
        """Boolean array, True at outlying positions."""
        values = self._values(series)
        lo, hi = self.bounds(series)
        if np.isnan(lo):
            return np.zeros(values.shape, dtype=bool)
        with np.errstate(invalid="ignore"):
            return (values < lo) | (values > hi)

    def detect(self, series: pd.Series) -> np.ndarray:
        """Positional indices of the outliers."""
        idx = np.flatnonzero(self.mask(series))
        self.logger.debug(f"{series.name}: {idx.size} outlier(s) by {self.rule} rule")
        return idx


def diagnose_outliers(table: pd.DataFrame, detector: Optional[OutlierDetector] = None) -> pd.DataFrame:
    """Per numeric column: outlier count and ratio, and means with and without outliers."""
    detector = detector or OutlierDetector()
    rows = {}
    for col in table.columns:
        s = table[col]
        if not is_numeric(s):
            continue
        mask = detector.mask(s)
        values = s.to_numpy(dtype=float, na_value=np.nan)
        outliers = values[mask]
        inliers = values[~mask & ~np.isnan(values)]
        rows[col] = {
            "outliers_cnt": int(mask.sum()),
            "outliers_ratio": float(mask.mean()) * 100 if mask.size else 0.0,
            "outliers_mean": float(outliers.mean()) if outliers.size else float("nan"),
            "with_mean": float(np.nanmean(values)) if np.any(~np.isnan(values)) else float("nan"),
            "without_mean": float(inliers.mean()) if inliers.size else float("nan"),
        }
    return pd.DataFrame.from_dict(rows, orient="index")
