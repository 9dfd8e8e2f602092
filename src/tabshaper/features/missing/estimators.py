from __future__ import annotations
from typing import Dict, Any
from sklearn.linear_model import BayesianRidge
from sklearn.neighbors import KNeighborsClassifier, KNeighborsRegressor
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from tabshaper.core.exceptions import UnsupportedMethodError
from tabshaper.core.interfaces import EstimatorFactory


class DefaultEstimatorFactory(EstimatorFactory):
    """Strategies depend on this abstraction, not on concrete estimators."""

    def make(self, method: str, kind: str, plan: Dict[str, Any]):
        seed = plan.get("seed", 42)
        if method == "knn":
            k = int(plan.get("k", 5))
            if kind == "numeric":
                return KNeighborsRegressor(n_neighbors=k, weights=plan.get("weights", "uniform"))
            return KNeighborsClassifier(n_neighbors=k, weights=plan.get("weights", "uniform"))
        if method == "rpart":
            params = dict(
                max_depth=plan.get("max_depth", None),
                min_samples_leaf=int(plan.get("min_samples_leaf", 7)),
                ccp_alpha=float(plan.get("ccp_alpha", 0.0)),
                random_state=seed,
            )
            if kind == "numeric":
                return DecisionTreeRegressor(**params)
            return DecisionTreeClassifier(**params)
        if method == "mice":
            # conditional model for every column of the chain
            return BayesianRidge()
        raise UnsupportedMethodError(f"No estimator for method '{method}'")
