from __future__ import annotations
from typing import Dict, Any, List, Optional
import numpy as np
import pandas as pd
from sklearn.experimental import enable_iterative_imputer  # noqa: F401
from sklearn.impute import IterativeImputer
from sklearn.preprocessing import OrdinalEncoder

from tabshaper.core.interfaces import ImputationStrategy, EstimatorFactory
from tabshaper.core.utils import LoggerFactory, is_numeric
from tabshaper.features.missing.preprocessors import as_object


class ChainedEquationsStrategy(ImputationStrategy):
    """
    Multiple imputation by chained equations.

    Every predictor and the imputed column take part in the chain; missing
    predictor values are imputed along the way. ``m`` chains are run with
    seeds ``seed, seed+1, ...`` and pooled: the mean of the draws for numeric
    columns, the majority vote for categorical ones.
    """

    methods = ("mice",)
    kinds = {"mice": ("numeric", "categorical")}
    scopes = ("missing",)
    model_based = True

    def __init__(self, column: str, plan: Dict[str, Any], estimator_factory: EstimatorFactory):
        super().__init__(column, plan)
        self.est_factory = estimator_factory
        self.features: List[str] = list(plan.get("features", []))
        self.seed: int = int(plan.get("seed", 42))
        self.m: int = int(plan.get("m", 5))
        self.max_iter: int = int(plan.get("max_iter", 10))
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

        self._numeric_target = True
        self._encoders: Dict[str, OrdinalEncoder] = {}
        self._matrix: Optional[pd.DataFrame] = None

    def _encode(self, X: pd.DataFrame) -> pd.DataFrame:
        cols = [c for c in self.features if c in X.columns and X[c].notna().any()] + [self.column]
        out = {}
        for col in cols:
            s = X[col]
            if is_numeric(s):
                out[col] = s.astype(float)
                continue
            enc = OrdinalEncoder(encoded_missing_value=np.nan)
            codes = enc.fit_transform(as_object(s).to_frame())
            self._encoders[col] = enc
            out[col] = pd.Series(codes[:, 0], index=X.index)
        return pd.DataFrame(out, index=X.index)

    def fit(self, X: pd.DataFrame, mask: pd.Series) -> "ChainedEquationsStrategy":
        self._numeric_target = is_numeric(X[self.column])
        work = X.copy()
        # masked rows count as unknown for the chain
        work.loc[mask.to_numpy(), self.column] = np.nan
        self._matrix = self._encode(work)
        return self

    def _run_chain(self, seed: int) -> np.ndarray:
        imp = IterativeImputer(
            estimator=self.est_factory.make("mice", "numeric", self.plan),
            max_iter=self.max_iter,
            sample_posterior=True,
            initial_strategy="mean" if self._numeric_target else "most_frequent",
            random_state=seed,
            keep_empty_features=True,
        )
        filled = imp.fit_transform(self._matrix.to_numpy(dtype=float, copy=True))
        return filled[:, self._matrix.columns.get_loc(self.column)]

    def predict(self, X: pd.DataFrame, mask: pd.Series) -> pd.Series:
        rows = X.index[mask.to_numpy()]
        if self._matrix is None or len(rows) == 0:
            return pd.Series(np.nan, index=rows, dtype=object)

        positions = np.flatnonzero(mask.to_numpy())
        draws = np.vstack([self._run_chain(self.seed + i)[positions] for i in range(self.m)])
        self.logger.info(f"Pooled {self.m} chained-equation draws for '{self.column}'")

        if self._numeric_target:
            return pd.Series(draws.mean(axis=0), index=rows, dtype=object)

        enc = self._encoders[self.column]
        levels = np.array([c for c in enc.categories_[0] if not pd.isna(c)], dtype=object)
        n_levels = len(levels)
        codes = np.clip(np.rint(draws), 0, n_levels - 1).astype(int)
        # majority vote per row, ties to the lowest code
        votes = np.array([np.bincount(codes[:, j], minlength=n_levels).argmax()
                          for j in range(codes.shape[1])])
        labels = levels[votes]
        return pd.Series(labels, index=rows, dtype=object)
