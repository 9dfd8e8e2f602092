from __future__ import annotations
from typing import List
import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from tabshaper.core.interfaces import FeaturePreprocessor
from tabshaper.core.utils import is_numeric


def as_object(series: pd.Series) -> pd.Series:
    """Categorical values as plain objects with ``np.nan`` for missing."""
    return series.astype(object).where(series.notna(), np.nan)


class DefaultFeaturePreprocessor(FeaturePreprocessor):
    """A tiny class only responsible for building the predictor matrix."""

    def build(self, X: pd.DataFrame, features: List[str]):
        feats_present = [f for f in features if f in X.columns and X[f].notna().any()]
        num_cols = [c for c in feats_present if is_numeric(X[c])]
        cat_cols = [c for c in feats_present if c not in num_cols]

        transformers = []
        if num_cols:
            transformers.append(("num", Pipeline([
                ("impute", SimpleImputer(strategy="median")),
                ("scale", StandardScaler()),
            ]), num_cols))
        if cat_cols:
            transformers.append(("cat", Pipeline([
                ("impute", SimpleImputer(strategy="most_frequent")),
                ("onehot", OneHotEncoder(handle_unknown="ignore")),
            ]), cat_cols))

        return ColumnTransformer(transformers=transformers, remainder="drop"), feats_present

    @staticmethod
    def prepare(X: pd.DataFrame, features: List[str]) -> pd.DataFrame:
        """Copy of the predictor frame with categoricals cast for scikit-learn."""
        out = X[features].copy()
        for col in features:
            if not is_numeric(out[col]):
                out[col] = as_object(out[col])
            else:
                out[col] = out[col].astype(float)
        return out
