"""Per-column entries of a transformation report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import pandas as pd

from tabshaper.features.binning.bins import Bins
from tabshaper.features.missing.result import ImputationResult
from tabshaper.features.transforms.transformer import TransformResult

_STAT_COLUMNS = ["n", "na", "mean", "sd", "p00", "p25", "p50", "p75", "p100", "skewness", "kurtosis"]


class EntryKind(str, Enum):
    IMPUTATION = "imputation"
    TRANSFORM = "transform"
    BINNING = "binning"
    ERROR = "error"


def _stat_table(summary: pd.DataFrame) -> pd.DataFrame:
    return summary[[c for c in _STAT_COLUMNS if c in summary.columns]]


@dataclass(frozen=True, eq=False)
class ImputationEntry:
    column: str
    stage: str
    result: ImputationResult
    kind: EntryKind = field(default=EntryKind.IMPUTATION, init=False)

    @property
    def title(self) -> str:
        return f"{self.stage.capitalize()} imputation ({self.result.method}): {self.result.n_filled} value(s)"

    def table(self) -> pd.DataFrame:
        summary = self.result.summary()
        return _stat_table(summary) if self.result.is_numeric else summary


@dataclass(frozen=True, eq=False)
class TransformEntry:
    column: str
    result: TransformResult
    stage: str = "transform"
    kind: EntryKind = field(default=EntryKind.TRANSFORM, init=False)

    @property
    def title(self) -> str:
        return (
            f"Transformation ({self.result.method}): skewness "
            f"{self.result.skewness_before:.3f} -> {self.result.skewness_after:.3f}"
        )

    def table(self) -> pd.DataFrame:
        return _stat_table(self.result.summary())


@dataclass(frozen=True, eq=False)
class BinningEntry:
    column: str
    result: Bins
    stage: str = "binning"
    kind: EntryKind = field(default=EntryKind.BINNING, init=False)

    @property
    def title(self) -> str:
        if self.result.is_optimal:
            return (
                f"Optimal binning by '{self.result.target}': {self.result.n_intervals} interval(s), "
                f"IV {self.result.iv:.4f}, KS {self.result.ks:.4f}"
            )
        return f"Binning ({self.result.type}): {self.result.n_intervals} interval(s)"

    def table(self) -> pd.DataFrame:
        if self.result.is_optimal:
            return self.result.iv_table
        return self.result.summary()


@dataclass(frozen=True)
class ErrorEntry:
    """A stage that failed for one column; the rest of the report goes on."""

    column: str
    stage: str
    error_type: str
    message: str
    kind: EntryKind = field(default=EntryKind.ERROR, init=False)

    @classmethod
    def from_exception(cls, column: str, stage: str, exc: BaseException) -> "ErrorEntry":
        return cls(column, stage, type(exc).__name__, str(exc))

    @property
    def title(self) -> str:
        return f"{self.stage} failed: {self.error_type}"

    def table(self) -> pd.DataFrame:
        return pd.DataFrame([{"stage": self.stage, "error": self.error_type, "message": self.message}])


Entry = Union[ImputationEntry, TransformEntry, BinningEntry, ErrorEntry]
