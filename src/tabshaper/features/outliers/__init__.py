"""Outlier detection."""
from tabshaper.features.outliers.detector import OutlierDetector, diagnose_outliers

__all__ = ["OutlierDetector", "diagnose_outliers"]
