from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd
from scipy import stats

from tabshaper.core.utils import LoggerFactory, is_numeric

logger = LoggerFactory.get_logger(__name__)

QUANTILE_PROBS = (0.0, 0.01, 0.05, 0.10, 0.25, 0.50, 0.75, 0.90, 0.95, 0.99, 1.0)


def _quantile_key(p: float) -> str:
    return f"p{int(round(p * 100)):02d}"


@dataclass(frozen=True)
class ColumnStats:
    """Descriptive statistics of a single column.

    Numeric-only fields are ``None`` for categorical columns, and
    ``frequencies`` is only filled for categorical ones.
    """

    name: str
    kind: str
    n: int
    n_missing: int
    mode: Any = None
    mean: Optional[float] = None
    median: Optional[float] = None
    variance: Optional[float] = None
    sd: Optional[float] = None
    se_mean: Optional[float] = None
    iqr: Optional[float] = None
    skewness: Optional[float] = None
    kurtosis: Optional[float] = None
    quantiles: Dict[str, float] = field(default_factory=dict)
    n_levels: Optional[int] = None
    frequencies: Dict[Any, int] = field(default_factory=dict)

    @property
    def missing_ratio(self) -> float:
        total = self.n + self.n_missing
        return float(self.n_missing) / total if total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "n": self.n,
            "na": self.n_missing,
            "mode": self.mode,
        }
        if self.kind == "numeric":
            row.update({
                "mean": self.mean,
                "variance": self.variance,
                "sd": self.sd,
                "se_mean": self.se_mean,
                "IQR": self.iqr,
                "skewness": self.skewness,
                "kurtosis": self.kurtosis,
            })
            row.update(self.quantiles)
        else:
            row["levels"] = self.n_levels
        return row


def get_mode(series: pd.Series) -> Any:
    """Most frequent non-missing value; ties go to the smallest value."""
    modes = series.dropna().mode()
    if modes.empty:
        return np.nan
    return modes.iloc[0]


def skewness(series: pd.Series) -> float:
    """Third standardised moment of the non-missing values (population form)."""
    values = pd.to_numeric(series, errors="coerce").dropna().to_numpy(dtype=float)
    if values.size < 2 or np.ptp(values) == 0:
        return float("nan")
    return float(stats.skew(values, bias=True))


def describe_column(series: pd.Series, name: Optional[str] = None) -> ColumnStats:
    name = str(name if name is not None else series.name)
    observed = series.dropna()
    n, n_missing = int(observed.size), int(series.isna().sum())

    if not is_numeric(series):
        counts = observed.value_counts()
        return ColumnStats(
            name=name,
            kind="categorical",
            n=n,
            n_missing=n_missing,
            mode=get_mode(series),
            n_levels=int(counts.size),
            frequencies={k: int(v) for k, v in counts.items()},
        )

    values = observed.to_numpy(dtype=float)
    if values.size == 0:
        return ColumnStats(name=name, kind="numeric", n=0, n_missing=n_missing)

    q = np.quantile(values, QUANTILE_PROBS)
    quantiles = {_quantile_key(p): float(v) for p, v in zip(QUANTILE_PROBS, q)}
    variance = float(np.var(values, ddof=1)) if values.size > 1 else float("nan")
    sd = float(np.sqrt(variance)) if values.size > 1 else float("nan")
    if values.size > 3 and np.ptp(values) > 0:
        kurt = float(stats.kurtosis(values, fisher=True, bias=True))
    else:
        kurt = float("nan")

    return ColumnStats(
        name=name,
        kind="numeric",
        n=n,
        n_missing=n_missing,
        mode=get_mode(series),
        mean=float(values.mean()),
        median=float(np.median(values)),
        variance=variance,
        sd=sd,
        se_mean=sd / np.sqrt(values.size) if values.size > 1 else float("nan"),
        iqr=quantiles["p75"] - quantiles["p25"],
        skewness=skewness(series),
        kurtosis=kurt,
        quantiles=quantiles,
    )


def describe(table: pd.DataFrame, numeric_only: bool = True) -> pd.DataFrame:
    """One row of descriptive statistics per column."""
    rows = {}
    for col in table.columns:
        if numeric_only and not is_numeric(table[col]):
            continue
        rows[col] = describe_column(table[col], name=col).to_dict()
    return pd.DataFrame.from_dict(rows, orient="index")


def find_skewness(
    table: pd.DataFrame,
    index: bool = True,
    value: bool = False,
    thres: Optional[float] = None,
    digits: int = 3,
) -> Union[List[str], List[int], pd.Series]:
    """
    Find numeric columns whose absolute skewness exceeds a threshold.

    Parameters
    ----------
    table : pd.DataFrame
        Table to scan; only numeric columns are considered.
    index : bool, default True
        Report positional column indices instead of column names.
    value : bool, default False
        Return a Series of skewness values instead of a plain list.
    thres : float, optional
        Threshold on ``|skewness|``; 0 when not given.
    digits : int, default 3
        Rounding applied to returned values.

    Returns
    -------
    list or pd.Series
        Column names or positions (in table order), or their skewness values.
    """
    thres = 0.0 if thres is None else float(thres)
    positions: List[int] = []
    names: List[str] = []
    values: List[float] = []

    for pos, col in enumerate(table.columns):
        if not is_numeric(table[col]):
            continue
        skew = skewness(table[col])
        if np.isnan(skew) or abs(skew) <= thres:
            continue
        positions.append(pos)
        names.append(col)
        values.append(round(skew, digits))

    logger.info(f"Skewness scan: {len(names)} column(s) above |{thres}|")

    keys = positions if index else names
    if value:
        return pd.Series(values, index=keys, dtype=float, name="skewness")
    return list(keys)
