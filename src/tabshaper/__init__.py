"""tabshaper: imputation, transformation and binning of tabular data."""

from tabshaper.core.exceptions import TabshaperError
from tabshaper.features.binning import Bins, binning, binning_by
from tabshaper.features.missing import ImputationResult, imputate_missing, imputate_outliers
from tabshaper.features.outliers import OutlierDetector, diagnose_outliers
from tabshaper.features.stats import describe, find_skewness
from tabshaper.features.transforms import TransformResult, transform
from tabshaper.reporting import Report, TransformationReport, transformation_report

__version__ = "0.1.0"

__all__ = [
    "Bins",
    "ImputationResult",
    "OutlierDetector",
    "Report",
    "TabshaperError",
    "TransformResult",
    "TransformationReport",
    "binning",
    "binning_by",
    "describe",
    "diagnose_outliers",
    "find_skewness",
    "imputate_missing",
    "imputate_outliers",
    "transform",
    "transformation_report",
]
