from __future__ import annotations
from typing import Dict, Any, Optional
import numpy as np
import pandas as pd
from sklearn.impute import SimpleImputer

from tabshaper.core.interfaces import ImputationStrategy
from tabshaper.core.utils import is_numeric
from tabshaper.features.missing.preprocessors import as_object

_SKLEARN_STRATEGY = {"mean": "mean", "median": "median", "mode": "most_frequent"}


class ConstantStatStrategy(ImputationStrategy):
    """Replace every masked row with one statistic of the non-missing values."""

    methods = ("mean", "median", "mode")
    kinds = {"mean": ("numeric",), "median": ("numeric",), "mode": ("numeric", "categorical")}
    scopes = ("missing", "outlier")

    def __init__(self, column: str, plan: Dict[str, Any]):
        super().__init__(column, plan)
        self.imp: Optional[SimpleImputer] = None
        self.value_: Any = None

    def fit(self, X: pd.DataFrame, mask: pd.Series) -> "ConstantStatStrategy":
        s = X[self.column]
        frame = s.astype(float).to_frame() if is_numeric(s) else as_object(s).to_frame()
        self.imp = SimpleImputer(strategy=_SKLEARN_STRATEGY[self.method])
        self.imp.fit(frame)
        self.value_ = self.imp.statistics_[0]
        if isinstance(self.value_, np.generic):
            self.value_ = self.value_.item()
        return self

    def predict(self, X: pd.DataFrame, mask: pd.Series) -> pd.Series:
        return pd.Series(self.value_, index=X.index[mask.to_numpy()], dtype=object)
