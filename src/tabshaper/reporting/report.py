from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from tabshaper.core.exceptions import UnsupportedOutputFormatError
from tabshaper.core.utils import LoggerFactory, Timer, ToolkitConfig, is_numeric, require_column
from tabshaper.features.binning import Binner, OptimalBinner
from tabshaper.features.missing import Imputer
from tabshaper.features.outliers import OutlierDetector
from tabshaper.features.stats import find_skewness
from tabshaper.features.transforms import Transformer, suggest_method
from tabshaper.reporting.entries import (
    BinningEntry,
    Entry,
    EntryKind,
    ErrorEntry,
    ImputationEntry,
    TransformEntry,
)
from tabshaper.reporting.renderers import RENDERERS, get_renderer

DEFAULT_FILENAME = "transformation_report"


@dataclass(frozen=True, eq=False)
class Report:
    """Everything a renderer needs: per-column entries in table column order."""

    title: str
    columns: Tuple[str, ...]
    entries: Tuple[Entry, ...]
    shape: Tuple[int, int]
    target: Optional[str]
    output_format: str
    output_path: Path
    created_at: datetime

    def entries_for(self, column: str) -> List[Entry]:
        return [e for e in self.entries if e.column == column]

    def of_kind(self, kind: Union[EntryKind, str]) -> List[Entry]:
        kind = EntryKind(kind)
        return [e for e in self.entries if e.kind is kind]

    @property
    def errors(self) -> List[ErrorEntry]:
        return self.of_kind(EntryKind.ERROR)

    def overview(self) -> pd.DataFrame:
        """One row per entry: column, kind, stage and headline."""
        return pd.DataFrame(
            [{"column": e.column, "kind": e.kind.value, "stage": e.stage, "detail": e.title}
             for e in self.entries],
            columns=["column", "kind", "stage", "detail"],
        )


class TransformationReport:
    """
    Runs the whole toolkit over a table and renders the outcome.

    For every column except the target: missing-value imputation, outlier
    imputation (numeric), a skew-correcting transform for columns flagged
    by ``find_skewness`` and binning (numeric), plus optimal binning when a
    binary target is given. Stages of one column are chained, each working
    on the output of the previous one. A failing stage becomes an
    ``ErrorEntry`` and the remaining stages of that column are skipped.
    """

    def __init__(self, config: Optional[ToolkitConfig] = None):
        self.config = config or ToolkitConfig()
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def generate(
        self,
        table: pd.DataFrame,
        target: Optional[str] = None,
        output_format: str = "pdf",
        output_path: Optional[Union[str, Path]] = None,
    ) -> Report:
        output_format = str(output_format).lower()
        if output_format not in RENDERERS:
            raise UnsupportedOutputFormatError(
                f"Unsupported report format '{output_format}'; choose one of {sorted(RENDERERS)}"
            )
        renderer = get_renderer(output_format, self.config.report)
        if target is not None:
            require_column(table, target, role="target")
        path = Path(output_path) if output_path is not None else (
            Path(self.config.report.output_dir) / f"{DEFAULT_FILENAME}.{renderer.extension}"
        )

        columns = [c for c in table.columns if c != target]
        skewed = set(find_skewness(table[columns], index=False, thres=self.config.transform.skew_threshold))
        binary_target = target is not None and table[target].dropna().nunique() == 2
        if target is not None and not binary_target:
            self.logger.warning(f"Target '{target}' is not binary; optimal binning is skipped")

        with Timer(self.logger, f"column processing ({len(columns)} columns, n_jobs={self.config.report.n_jobs})"):
            per_column = Parallel(n_jobs=self.config.report.n_jobs, prefer="threads")(
                delayed(self._process_column)(table, col, target if binary_target else None, col in skewed)
                for col in columns
            )

        report = Report(
            title=self.config.report.title,
            columns=tuple(columns),
            entries=tuple(entry for entries in per_column for entry in entries),
            shape=table.shape,
            target=target,
            output_format=output_format,
            output_path=path,
            created_at=datetime.now(),
        )
        if report.errors:
            self.logger.warning(f"{len(report.errors)} stage(s) failed; see the error entries of the report")

        with Timer(self.logger, f"{output_format} rendering"):
            renderer.render(report, path)
        self.logger.info(f"Report with {len(report.entries)} entries written to {path}")
        return report

    def _process_column(
        self,
        table: pd.DataFrame,
        column: str,
        target: Optional[str],
        skewed: bool,
    ) -> List[Entry]:
        cfg = self.config
        entries: List[Entry] = []
        current = table[column]
        stage = "missing"
        try:
            imputer = Imputer(cfg.imputation, cfg.outliers)
            if current.isna().any():
                result = imputer.imputate_missing(table, column)
                entries.append(ImputationEntry(column, stage, result))
                current = result.imputed

            if not is_numeric(current):
                return entries

            stage = "outlier"
            detector = OutlierDetector(cfg.outliers.rule, cfg.outliers.coef)
            if detector.mask(current).any():
                result = imputer.imputate_outliers(current.to_frame(column), column)
                entries.append(ImputationEntry(column, stage, result))
                current = result.imputed

            if skewed:
                stage = "transform"
                method = cfg.transform.method
                if method == "auto":
                    method = suggest_method(current)
                result = Transformer().transform(current, method)
                entries.append(TransformEntry(column, result))
                current = result.transformed.replace([np.inf, -np.inf], np.nan)

            stage = "binning"
            entries.append(BinningEntry(column, Binner(cfg.binning).binning(current)))

            if target is not None:
                stage = "optimal binning"
                frame = pd.DataFrame({column: current, target: table[target]})
                entries.append(BinningEntry(column, OptimalBinner(cfg.binning).fit(frame, target, column)))
        except Exception as exc:
            self.logger.warning(f"'{column}': {stage} failed with {type(exc).__name__}: {exc}")
            entries.append(ErrorEntry.from_exception(column, stage, exc))
        return entries


def transformation_report(
    table: pd.DataFrame,
    target: Optional[str] = None,
    output_format: str = "pdf",
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[ToolkitConfig] = None,
) -> Report:
    """Module-level shortcut for ``TransformationReport(config).generate``."""
    return TransformationReport(config).generate(
        table, target=target, output_format=output_format, output_path=output_path
    )
