from __future__ import annotations
from typing import Dict, Any, Optional, List
import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from tabshaper.core.interfaces import ImputationStrategy, EstimatorFactory, FeaturePreprocessor
from tabshaper.core.utils import LoggerFactory, is_numeric
from tabshaper.features.missing.preprocessors import as_object


class ModelImputerStrategy(ImputationStrategy):
    """
    Model-based imputer for a single column (k-nearest neighbours or a
    recursive-partitioning tree).

    The estimator is fitted on the observed rows of the column using the
    planned predictor columns and predicts the masked rows only.
    """

    methods = ("knn", "rpart")
    kinds = {"knn": ("numeric",), "rpart": ("numeric", "categorical")}
    scopes = ("missing",)
    model_based = True

    def __init__(
        self,
        column: str,
        plan: Dict[str, Any],
        estimator_factory: EstimatorFactory,
        preprocessor: FeaturePreprocessor,
    ):
        super().__init__(column, plan)
        self.est_factory = estimator_factory
        self.preprocessor = preprocessor
        self.features: List[str] = list(plan.get("features", []))
        self.seed: Optional[int] = plan.get("seed")
        self.pipe: Optional[Pipeline] = None
        self._feats_present: List[str] = []
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def fit(self, X: pd.DataFrame, mask: pd.Series) -> "ModelImputerStrategy":
        observed = ~mask.to_numpy() & X[self.column].notna().to_numpy()
        if observed.sum() == 0:
            return self

        X_fit = self.preprocessor.prepare(X.loc[observed], self.features)
        pre, self._feats_present = self.preprocessor.build(X_fit, self.features)
        if not self._feats_present:
            self.logger.warning(f"No usable predictors for '{self.column}'")
            return self

        kind = "numeric" if is_numeric(X[self.column]) else "categorical"
        plan = dict(self.plan)
        if self.method == "knn":
            # cannot ask for more neighbours than observed rows
            plan["k"] = min(int(plan.get("k", 5)), int(observed.sum()))
        est = self.est_factory.make(self.method, kind, plan)
        self.pipe = Pipeline([("pre", pre), ("model", est)])

        y = X.loc[observed, self.column]
        y = y.astype(float) if kind == "numeric" else as_object(y)
        self.pipe.fit(X_fit[self._feats_present], y)
        self.logger.info(
            f"Fitted {self.method} imputer for '{self.column}' on {int(observed.sum())} rows "
            f"with {len(self._feats_present)} predictor(s)"
        )
        return self

    def predict(self, X: pd.DataFrame, mask: pd.Series) -> pd.Series:
        rows = X.index[mask.to_numpy()]
        if self.pipe is None or len(rows) == 0:
            return pd.Series(np.nan, index=rows, dtype=object)
        X_missing = self.preprocessor.prepare(X.loc[rows], self._feats_present)
        return pd.Series(self.pipe.predict(X_missing), index=rows, dtype=object)
