from __future__ import annotations
from typing import Any, Dict, List, Optional, Type

from tabshaper.core.exceptions import UnsupportedMethodError
from tabshaper.core.interfaces import EstimatorFactory, FeaturePreprocessor, ImputationStrategy
from .strategies.capping import CappingStrategy
from .strategies.mice import ChainedEquationsStrategy
from .strategies.model import ModelImputerStrategy
from .strategies.simple import ConstantStatStrategy
from .estimators import DefaultEstimatorFactory
from .preprocessors import DefaultFeaturePreprocessor


class StrategyFactory:
    """Add new strategies through ``register`` without changing the Imputer."""

    def __init__(
        self,
        estimator_factory: Optional[EstimatorFactory] = None,
        preprocessor: Optional[FeaturePreprocessor] = None,
    ):
        self.est_factory = estimator_factory or DefaultEstimatorFactory()
        self.preprocessor = preprocessor or DefaultFeaturePreprocessor()
        self._registry: Dict[str, Type[ImputationStrategy]] = {}
        for cls in (ConstantStatStrategy, CappingStrategy, ModelImputerStrategy, ChainedEquationsStrategy):
            self.register(cls)

    def register(self, cls: Type[ImputationStrategy]) -> None:
        for method in cls.methods:
            self._registry[method] = cls

    def methods(self, kind: str, scope: str) -> List[str]:
        """Methods usable on a ``kind`` column for ``scope`` ("missing" or "outlier")."""
        return [m for m, cls in self._registry.items()
                if scope in cls.scopes and kind in cls.kinds[m]]

    def strategy_class(self, method: str, kind: str, scope: str) -> Type[ImputationStrategy]:
        cls = self._registry.get(method)
        if cls is None or scope not in cls.scopes or kind not in cls.kinds[method]:
            raise UnsupportedMethodError(
                f"Method '{method}' is not available for {scope} imputation of a {kind} column; "
                f"choose one of {self.methods(kind, scope)}"
            )
        return cls

    def make(self, column: str, plan: Dict[str, Any], kind: str, scope: str) -> ImputationStrategy:
        cls = self.strategy_class(plan["method"], kind, scope)
        if cls is ModelImputerStrategy:
            return cls(column, plan, self.est_factory, self.preprocessor)
        if cls is ChainedEquationsStrategy:
            return cls(column, plan, self.est_factory)
        return cls(column, plan)
