"""Binning of continuous columns into ordered categories."""
from tabshaper.features.binning.bins import MISSING_LEVEL, Bins, cut, interval_labels
from tabshaper.features.binning.optimal import OptimalBinner, binning_by
from tabshaper.features.binning.unsupervised import Binner, binning, sturges

__all__ = [
    "MISSING_LEVEL",
    "Bins",
    "Binner",
    "OptimalBinner",
    "binning",
    "binning_by",
    "cut",
    "interval_labels",
    "sturges",
]
