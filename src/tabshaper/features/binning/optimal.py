from __future__ import annotations

import math
from typing import Any, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.tree import DecisionTreeClassifier

from tabshaper.core.exceptions import NonBinaryTargetError, UnsupportedMethodError
from tabshaper.core.utils import BinningConfig, LoggerFactory, SeedManager, is_numeric, require_column
from tabshaper.features.binning.bins import Bins, cut, interval_labels

MISSING_BIN = "Missing"
TOTAL_ROW = "Total"
_PSEUDO_COUNT = 0.5


def _positive_class(classes: np.ndarray) -> Any:
    """1/True when present (the larger sorted value in general)."""
    try:
        ordered = sorted(classes)
    except TypeError:
        ordered = sorted(classes, key=str)
    return ordered[-1]


def _event_rates(x: np.ndarray, y: np.ndarray, breaks: np.ndarray) -> np.ndarray:
    codes = np.clip(np.searchsorted(breaks[1:-1], x, side="left"), 0, len(breaks) - 2)
    rates = np.array([y[codes == i].mean() if np.any(codes == i) else np.nan
                      for i in range(len(breaks) - 1)])
    return rates


class OptimalBinner:
    """
    Supervised binning of a numeric feature against a binary target.

    Candidate cut points come from an entropy decision tree limited to
    ``max_bins`` leaves of at least ``min_bin_pct`` of the rows. With
    ``monotonic`` on, adjacent intervals are merged until the event rate
    moves in one direction (the sign of the Spearman correlation).
    """

    def __init__(self, config: Optional[BinningConfig] = None):
        self.config = config or BinningConfig()
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    # ---- breakpoint search ----
    def _tree_breaks(self, x: np.ndarray, y: np.ndarray, max_bins: int, min_leaf: int, seed: int) -> np.ndarray:
        tree = DecisionTreeClassifier(
            criterion="entropy",
            max_leaf_nodes=max_bins,
            min_samples_leaf=min_leaf,
            random_state=seed,
        )
        tree.fit(x.reshape(-1, 1), y)
        split = tree.tree_.children_left != -1
        thresholds = np.sort(tree.tree_.threshold[split])
        return np.unique(np.concatenate([[x.min()], thresholds, [x.max()]]))

    def _enforce_monotonic(self, x: np.ndarray, y: np.ndarray, breaks: np.ndarray) -> np.ndarray:
        rho = stats.spearmanr(x, y)[0] if np.unique(x).size > 1 else np.nan
        direction = -1.0 if rho < 0 else 1.0
        while len(breaks) > 2:
            rates = _event_rates(x, y, breaks)
            steps = np.diff(rates) * direction
            bad = np.flatnonzero(steps < 0)
            if bad.size == 0:
                break
            # drop the edge between the first offending pair
            breaks = np.delete(breaks, bad[0] + 1)
        return breaks

    # ---- scoring ----
    @staticmethod
    def _score(good: np.ndarray, bad: np.ndarray, total_good: int, total_bad: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        good = good.astype(float)
        bad = bad.astype(float)
        sparse = (good == 0) | (bad == 0)
        adj_good = np.where(sparse, good + _PSEUDO_COUNT, good)
        adj_bad = np.where(sparse, bad + _PSEUDO_COUNT, bad)
        dist_good = adj_good / total_good
        dist_bad = adj_bad / total_bad
        woe = np.log(dist_good / dist_bad)
        iv = (dist_good - dist_bad) * woe
        return dist_good, dist_bad, woe, iv

    def fit(self, table: pd.DataFrame, target: str, feature: str, **params: Any) -> Bins:
        x_all = require_column(table, feature, role="feature")
        y_all = require_column(table, target, role="target")
        if not is_numeric(x_all):
            raise UnsupportedMethodError(f"Optimal binning needs a numeric feature, '{feature}' is {x_all.dtype}")

        classes = y_all.dropna().unique()
        if len(classes) != 2:
            raise NonBinaryTargetError(
                f"Target '{target}' must have exactly two distinct values, found {len(classes)}"
            )
        positive = _positive_class(classes)

        known = y_all.notna().to_numpy()
        if not known.all():
            self.logger.warning(f"Ignoring {int((~known).sum())} row(s) with missing '{target}'")
        x = x_all.to_numpy(dtype=float, na_value=np.nan)[known]
        y = (y_all[known] == positive).to_numpy().astype(int)
        observed = ~np.isnan(x)
        if not observed.any():
            raise UnsupportedMethodError(f"'{feature}' has no observed values to bin")
        x_obs, y_obs = x[observed], y[observed]

        max_bins = int(params.get("max_bins", self.config.max_bins))
        min_bin_pct = float(params.get("min_bin_pct", self.config.min_bin_pct))
        monotonic = bool(params.get("monotonic", self.config.monotonic))
        seed = SeedManager.resolve(params.get("seed"), default=self.config.seed)
        min_leaf = max(1, int(math.ceil(min_bin_pct * x_obs.size)))

        breaks = self._tree_breaks(x_obs, y_obs, max_bins, min_leaf, seed)
        if monotonic:
            breaks = self._enforce_monotonic(x_obs, y_obs, breaks)
        labels = interval_labels(breaks)

        iv_table = self._iv_table(x, y, breaks, labels)
        per_bin = iv_table[~iv_table["bin"].isin([MISSING_BIN, TOTAL_ROW])]
        total_iv = float(iv_table.loc[iv_table["bin"] == TOTAL_ROW, "iv"].iloc[0])
        ks = float(np.max(np.abs(np.cumsum(per_bin["dist_good"]) - np.cumsum(per_bin["dist_bad"]))))

        self.logger.info(
            f"Optimal binning of '{feature}' against '{target}' (event={positive!r}): "
            f"{len(labels)} interval(s), IV={total_iv:.4f}, KS={ks:.4f}"
        )
        return Bins(
            column=feature,
            type="optimal",
            breaks=breaks,
            labels=labels,
            binned=cut(x_all, breaks, labels),
            n_bins=max_bins,
            target=target,
            woe=per_bin["woe"].to_numpy(dtype=float),
            iv=total_iv,
            ks=ks,
            iv_table=iv_table,
        )

    def _iv_table(self, x: np.ndarray, y: np.ndarray, breaks: np.ndarray, labels: Tuple[str, ...]) -> pd.DataFrame:
        total_good, total_bad = int(y.sum()), int((1 - y).sum())
        binned = cut(pd.Series(x), breaks, labels)

        names: List[str] = list(labels)
        good = [int(y[(binned == lab).to_numpy()].sum()) for lab in labels]
        count = [int((binned == lab).sum()) for lab in labels]
        missing = np.isnan(x)
        if missing.any():
            names.append(MISSING_BIN)
            good.append(int(y[missing].sum()))
            count.append(int(missing.sum()))

        good_arr = np.array(good)
        bad_arr = np.array(count) - good_arr
        dist_good, dist_bad, woe, iv = self._score(good_arr, bad_arr, total_good, total_bad)
        table = pd.DataFrame({
            "bin": names,
            "count": count,
            "count_pct": np.array(count) / max(len(x), 1),
            "good": good_arr,
            "bad": bad_arr,
            "event_rate": np.divide(good_arr, count, out=np.full(len(count), np.nan), where=np.array(count) > 0),
            "dist_good": dist_good,
            "dist_bad": dist_bad,
            "woe": woe,
            "iv": iv,
        })
        total = pd.DataFrame([{
            "bin": TOTAL_ROW,
            "count": int(table["count"].sum()),
            "count_pct": float(table["count_pct"].sum()),
            "good": total_good,
            "bad": total_bad,
            "event_rate": total_good / max(len(x), 1),
            "dist_good": float(table["dist_good"].sum()),
            "dist_bad": float(table["dist_bad"].sum()),
            "woe": np.nan,
            "iv": float(table["iv"].sum()),
        }])
        return pd.concat([table, total], ignore_index=True)


def binning_by(table: pd.DataFrame, target: str, feature: str, **params: Any) -> Bins:
    """Module-level shortcut for ``OptimalBinner().fit``."""
    return OptimalBinner().fit(table, target, feature, **params)
