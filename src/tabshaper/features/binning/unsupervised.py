from __future__ import annotations

import math
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np
import pandas as pd
from matplotlib.ticker import MaxNLocator

from tabshaper.core.exceptions import LabelCountMismatchError, UnsupportedMethodError
from tabshaper.core.utils import BinningConfig, LoggerFactory, SeedManager, is_numeric
from tabshaper.features.binning.bins import Bins, cut, interval_labels
from tabshaper.features.binning.clustering import bclust_breaks, kmeans_breaks


def sturges(n: int) -> int:
    return int(math.ceil(math.log2(max(n, 1)) + 1))


def quantile_breaks(values: np.ndarray, n_bins: int) -> np.ndarray:
    return np.unique(np.quantile(values, np.linspace(0.0, 1.0, n_bins + 1)))


def equal_breaks(values: np.ndarray, n_bins: int) -> np.ndarray:
    lo, hi = float(values.min()), float(values.max())
    return np.unique(np.linspace(lo, hi, n_bins + 1))


def pretty_breaks(values: np.ndarray, n_bins: int) -> np.ndarray:
    """
    Round breakpoints (1, 2 or 5 times a power of ten) spanning the data.

    Ticks come from matplotlib's ``MaxNLocator``; the outermost ticks are
    chosen so that the first edge is <= min and the last edge is >= max.
    Ties between candidate tick sets are resolved by the locator, which
    prefers the smallest step giving at most ``n_bins`` intervals.
    ``n_bins`` is therefore an upper bound: ``[-5, 5]`` with 4 bins gives
    the two intervals ``[-5, 0]`` and ``(0, 5]``.
    """
    lo, hi = float(values.min()), float(values.max())
    if lo == hi:
        return np.array([lo])
    ticks = MaxNLocator(nbins=n_bins, steps=[1, 2, 5, 10]).tick_values(lo, hi)
    first = ticks[ticks <= lo].max() if np.any(ticks <= lo) else lo
    last = ticks[ticks >= hi].min() if np.any(ticks >= hi) else hi
    inner = ticks[(ticks > first) & (ticks < last)]
    return np.unique(np.concatenate([[first], inner, [last]]))


class Binner:
    """
    Unsupervised discretisation of a numeric column.

    Types: quantile, equal, pretty, kmeans, bclust. kmeans and bclust are
    seeded; the seed comes from ``params["seed"]`` or the configuration.
    """

    def __init__(self, config: Optional[BinningConfig] = None):
        self.config = config or BinningConfig()
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)
        self._types: Dict[str, Callable[..., np.ndarray]] = {
            "quantile": lambda v, n, p: quantile_breaks(v, n),
            "equal": lambda v, n, p: equal_breaks(v, n),
            "pretty": lambda v, n, p: pretty_breaks(v, n),
            "kmeans": lambda v, n, p: kmeans_breaks(v, n, seed=p["seed"]),
            "bclust": lambda v, n, p: bclust_breaks(
                v, n, seed=p["seed"],
                n_bootstrap=int(p.get("n_bootstrap", self.config.n_bootstrap)),
                base_centers=int(p.get("base_centers", self.config.base_centers)),
            ),
        }

    @property
    def types(self) -> Sequence[str]:
        return tuple(self._types)

    def binning(
        self,
        column: pd.Series,
        n_bins: Optional[int] = None,
        type: Optional[str] = None,
        labels: Optional[Sequence[str]] = None,
        **params: Any,
    ) -> Bins:
        bin_type = str(type or self.config.type).lower()
        if bin_type not in self._types:
            raise UnsupportedMethodError(f"Unknown binning type '{bin_type}'; choose one of {list(self.types)}")
        if not isinstance(column, pd.Series) or not is_numeric(column):
            dtype = getattr(column, "dtype", column.__class__.__name__)
            raise UnsupportedMethodError(f"Binning needs a numeric column, got {dtype}")

        values = column.dropna().to_numpy(dtype=float)
        if values.size == 0:
            raise UnsupportedMethodError(f"'{column.name}' has no observed values to bin")
        if n_bins is None:
            n_bins = self.config.n_bins if self.config.n_bins is not None else sturges(values.size)
        n_bins = int(n_bins)
        if n_bins < 1:
            raise ValueError("n_bins must be at least 1")

        params = dict(params)
        params["seed"] = SeedManager.resolve(params.get("seed"), default=self.config.seed)
        breaks = self._types[bin_type](values, n_bins, params)
        n_intervals = max(len(breaks) - 1, 1)
        if bin_type in ("quantile", "equal") and n_intervals < n_bins:
            self.logger.warning(
                f"'{column.name}': {n_bins} {bin_type} bins collapsed to {n_intervals} (duplicate breaks)"
            )

        if labels is not None:
            labels = [str(label) for label in labels]
            if len(labels) != n_intervals:
                raise LabelCountMismatchError(
                    f"{len(labels)} label(s) supplied for {n_intervals} interval(s) of '{column.name}'"
                )
            if len(set(labels)) != len(labels):
                raise LabelCountMismatchError(f"Duplicate labels for '{column.name}': {labels}")
        else:
            labels = interval_labels(breaks)

        binned = cut(column, breaks, labels)
        self.logger.info(
            f"Binned '{column.name}' by {bin_type} into {n_intervals} interval(s): "
            f"{np.round(breaks, 4).tolist()}"
        )
        return Bins(
            column=str(column.name),
            type=bin_type,
            breaks=breaks,
            labels=tuple(labels),
            binned=binned,
            n_bins=n_bins,
        )


def binning(
    column: pd.Series,
    n_bins: Optional[int] = None,
    type: str = "quantile",
    labels: Optional[Sequence[str]] = None,
    **params: Any,
) -> Bins:
    """Module-level shortcut for ``Binner().binning``."""
    return Binner().binning(column, n_bins=n_bins, type=type, labels=labels, **params)
