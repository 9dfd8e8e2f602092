"""Missing-value and outlier imputation."""
from tabshaper.features.missing.factory import StrategyFactory
from tabshaper.features.missing.imputer import Imputer, imputate_missing, imputate_outliers
from tabshaper.features.missing.result import ImputationResult

__all__ = [
    "Imputer",
    "ImputationResult",
    "StrategyFactory",
    "imputate_missing",
    "imputate_outliers",
]
