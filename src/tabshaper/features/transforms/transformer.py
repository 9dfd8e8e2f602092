from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler, PowerTransformer

from tabshaper.core.exceptions import (
    DegenerateRangeError,
    TransformDomainError,
    UnsupportedMethodError,
)
from tabshaper.core.utils import LoggerFactory, is_numeric, require_column
from tabshaper.features.stats import describe_column, skewness


@dataclass(frozen=True, eq=False)
class TransformResult:
    """Original column, method and transformed column of one transform call."""

    column: str
    original: pd.Series
    method: str
    transformed: pd.Series
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "original", self.original.copy())
        object.__setattr__(self, "transformed", self.transformed.copy())

    @property
    def skewness_before(self) -> float:
        return skewness(self.original)

    @property
    def skewness_after(self) -> float:
        return skewness(self.transformed.replace([np.inf, -np.inf], np.nan))

    def summary(self) -> pd.DataFrame:
        """Descriptive statistics before ("original") and after ("transformation")."""
        after = self.transformed.replace([np.inf, -np.inf], np.nan)
        return pd.DataFrame({
            "original": describe_column(self.original, self.column).to_dict(),
            "transformation": describe_column(after, self.column).to_dict(),
        }).T

    def plot(self, title: Optional[str] = None):
        from tabshaper.features.visualizer import plot_transform
        return plot_transform(self, title=title)


# ---- elementwise methods ----

def _zscore(x: np.ndarray) -> np.ndarray:
    observed = x[~np.isnan(x)]
    if observed.size < 2:
        raise DegenerateRangeError("zscore needs at least two observed values")
    sd = observed.std(ddof=1)
    if sd == 0:
        raise DegenerateRangeError("zscore is undefined for a zero-variance column")
    return (x - observed.mean()) / sd


def _minmax(x: np.ndarray) -> np.ndarray:
    observed = x[~np.isnan(x)]
    if observed.size == 0 or observed.max() == observed.min():
        raise DegenerateRangeError("minmax is undefined when max equals min")
    return MinMaxScaler(clip=True).fit_transform(x.reshape(-1, 1)).ravel()


def _power(method: str) -> Callable[[np.ndarray], np.ndarray]:
    def apply(x: np.ndarray) -> np.ndarray:
        observed = x[~np.isnan(x)]
        if method == "box-cox" and np.any(observed <= 0):
            raise TransformDomainError("Box-Cox needs strictly positive values")
        if np.unique(observed).size < 2:
            raise DegenerateRangeError(f"{method} needs at least two distinct values")
        pt = PowerTransformer(method=method, standardize=False)
        return pt.fit_transform(x.reshape(-1, 1)).ravel()
    return apply


_METHODS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "zscore": _zscore,
    "minmax": _minmax,
    "log": np.log,
    "log+1": np.log1p,
    "sqrt": np.sqrt,
    "1/x": np.reciprocal,
    "x^2": np.square,
    "x^3": lambda x: np.power(x, 3),
    "box-cox": _power("box-cox"),
    "yeo-johnson": _power("yeo-johnson"),
}

METHODS = tuple(_METHODS)


class Transformer:
    """Standardisation and skew-correcting transforms of numeric columns."""

    def __init__(self):
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def transform(self, column: pd.Series, method: str = "zscore", **params: Any) -> TransformResult:
        """
        Transform a numeric column.

        Missing values stay missing. Out-of-domain values (log of 0, sqrt of
        a negative, 1/0) come back as the raw non-finite result.
        """
        key = str(method).lower()
        func = _METHODS.get(key)
        if func is None:
            raise UnsupportedMethodError(f"Unknown transform '{method}'; choose one of {list(METHODS)}")
        if not isinstance(column, pd.Series) or not is_numeric(column):
            dtype = getattr(column, "dtype", type(column).__name__)
            raise UnsupportedMethodError(f"Transform '{method}' needs a numeric column, got {dtype}")

        values = column.to_numpy(dtype=float, na_value=np.nan)
        with np.errstate(divide="ignore", invalid="ignore"):
            out = func(values)

        newly_bad = ~np.isfinite(out) & ~np.isnan(values)
        if newly_bad.any():
            self.logger.warning(
                f"{key} of '{column.name}' produced {int(newly_bad.sum())} non-finite value(s)"
            )
        transformed = pd.Series(out, index=column.index, name=column.name)
        self.logger.info(f"Applied {key} to '{column.name}'")
        return TransformResult(str(column.name), column, key, transformed, dict(params))

    def transform_table(
        self,
        table: pd.DataFrame,
        columns: Iterable[str],
        method: str = "zscore",
    ) -> Dict[str, TransformResult]:
        return {col: self.transform(require_column(table, col), method) for col in columns}


def suggest_method(column: pd.Series) -> str:
    """
    Skew-correcting transform for a skewed column: log+1 for right skew on a
    non-negative domain, x^2 for left skew on a non-negative domain and
    Yeo-Johnson otherwise.
    """
    skew = skewness(column)
    observed = column.dropna()
    non_negative = not observed.empty and float(observed.min()) >= 0
    if non_negative and skew > 0:
        return "log+1"
    if non_negative and skew < 0:
        return "x^2"
    return "yeo-johnson"


def transform(column: pd.Series, method: str = "zscore", **params: Any) -> TransformResult:
    """Module-level shortcut for ``Transformer().transform``."""
    return Transformer().transform(column, method, **params)
