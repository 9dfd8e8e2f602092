"""Core interfaces for the tabshaper toolkit."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd
from sklearn.base import BaseEstimator


class ImputationStrategy(ABC):
    """Fill the masked rows of a single column.

    ``fit`` learns from the rows outside ``mask``; ``predict`` returns the
    replacement values for the rows inside ``mask`` (indexed like them).
    """

    #: method names this strategy answers to
    methods: tuple = ()
    #: method name -> column kinds ("numeric", "categorical") it supports
    kinds: Dict[str, tuple] = {}
    #: "missing" and/or "outlier"
    scopes: tuple = ()
    #: whether a fitted model (and therefore a target) is needed
    model_based: bool = False

    def __init__(self, column: str, plan: Dict[str, Any]):
        self.column = column
        self.plan = plan
        self.method = plan["method"]

    @abstractmethod
    def fit(self, X: pd.DataFrame, mask: pd.Series) -> "ImputationStrategy":
        """Learn replacement values from the unmasked rows."""
        pass

    @abstractmethod
    def predict(self, X: pd.DataFrame, mask: pd.Series) -> pd.Series:
        """Return replacement values for the masked rows."""
        pass


class EstimatorFactory(ABC):
    """Builds the statistical collaborators used by model-based methods."""

    @abstractmethod
    def make(self, method: str, kind: str, plan: Dict[str, Any]) -> BaseEstimator:
        """Return an unfitted estimator for ``method`` on a ``kind`` column."""
        pass


class FeaturePreprocessor(ABC):
    """Turns predictor columns into a numeric design matrix."""

    @abstractmethod
    def build(self, X: pd.DataFrame, features: List[str]):
        """Return ``(transformer, features_present)``."""
        pass


class ReportRenderer(ABC):
    """Writes a finished report to a document on disk."""

    #: output format handled by the renderer
    format: str = ""
    #: file extension used for default output paths
    extension: str = ""

    @abstractmethod
    def render(self, report: Any, path: Union[str, Path]) -> Path:
        """Render ``report`` to ``path`` and return the written path."""
        pass
