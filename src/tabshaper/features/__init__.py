"""Column-level statistics, imputation, transforms and binning."""
from tabshaper.features.binning import Bins, binning, binning_by
from tabshaper.features.missing import ImputationResult, imputate_missing, imputate_outliers
from tabshaper.features.outliers import OutlierDetector, diagnose_outliers
from tabshaper.features.stats import describe, find_skewness
from tabshaper.features.transforms import TransformResult, transform

__all__ = [
    "Bins",
    "ImputationResult",
    "OutlierDetector",
    "TransformResult",
    "binning",
    "binning_by",
    "describe",
    "diagnose_outliers",
    "find_skewness",
    "imputate_missing",
    "imputate_outliers",
    "transform",
]
