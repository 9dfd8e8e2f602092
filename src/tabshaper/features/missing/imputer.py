from __future__ import annotations
from typing import Any, Dict, List, Optional
import numpy as np
import pandas as pd

from tabshaper.core.exceptions import (
    ColumnNotFoundError,
    MissingTargetError,
    UnsupportedMethodError,
)
from tabshaper.core.utils import (
    ImputationConfig,
    LoggerFactory,
    OutlierConfig,
    SeedManager,
    is_numeric,
    require_column,
)
from tabshaper.features.outliers import OutlierDetector
from tabshaper.features.stats import get_mode
from .factory import StrategyFactory
from .report import ImputationReport
from .result import ImputationResult


def _scalar(value: Any) -> Any:
    return value.item() if isinstance(value, np.generic) else value


class Imputer:
    """
    Fills missing values or outliers of one column at a time.

    The Imputer only selects predictors, splits rows into observed and
    masked, and splices the strategy's predictions back into the masked
    positions. It never mutates the input table; the actual estimation is
    done by the strategy the ``StrategyFactory`` returns for the method.
    """

    def __init__(
        self,
        config: Optional[ImputationConfig] = None,
        outlier_config: Optional[OutlierConfig] = None,
        factory: Optional[StrategyFactory] = None,
    ):
        self.config = config or ImputationConfig()
        self.outlier_config = outlier_config or OutlierConfig()
        self.factory = factory or StrategyFactory()
        self.report = ImputationReport()
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    # ---- public API ----
    def imputate_missing(
        self,
        table: pd.DataFrame,
        column: str,
        target: Optional[str] = None,
        method: Optional[str] = None,
        **params: Any,
    ) -> ImputationResult:
        """
        Impute the missing values of ``column``.

        Numeric columns accept mean, median, mode, knn, rpart and mice;
        categorical columns accept mode, rpart and mice. knn, rpart and mice
        need ``target``, which is left out of the predictors together with
        the imputed column; ``predictors=[...]`` narrows them further.
        Extra params: ``seed``, ``k`` (knn), ``max_depth`` (rpart),
        ``max_iter`` and ``m`` (mice).
        """
        series = require_column(table, column)
        if target is not None:
            require_column(table, target, role="target")
        kind = "numeric" if is_numeric(series) else "categorical"
        if method is None:
            method = self.config.numeric_method if kind == "numeric" else self.config.categorical_method
        method = str(method).lower()

        strategy_cls = self.factory.strategy_class(method, kind, "missing")
        if strategy_cls.model_based and target is None:
            raise MissingTargetError(f"Method '{method}' needs a target column to impute '{column}'")

        work = table.reset_index(drop=True)
        mask = work[column].isna()
        seed = SeedManager.resolve(params.get("seed"), default=self.config.seed)
        if not mask.any():
            self.logger.info(f"'{column}' has no missing values; nothing to impute")
            return ImputationResult(column, series, method, "missing", {}, target, seed)
        if mask.all():
            raise UnsupportedMethodError(f"'{column}' has no observed values to impute from")

        plan = self._plan(method, work, column, target, seed, params)
        strategy = self.factory.make(column, plan, kind, "missing")
        strategy.fit(work, mask)
        predictions = self._fallback(work[column], strategy.predict(work, mask), kind)

        result = ImputationResult(
            column=column,
            original=series,
            method=method,
            kind="missing",
            filled={int(i): _scalar(v) for i, v in predictions.items()},
            target=target,
            seed=seed if strategy_cls.model_based else None,
        )
        self.report.init_row(column, "missing", method, float(mask.mean()), int((~mask).sum()))
        self.report.update(column, "missing", {"n_filled": result.n_filled, "target": target})
        self.logger.info(f"Imputed {result.n_filled} missing value(s) of '{column}' with {method}")
        return result

    def imputate_outliers(
        self,
        table: pd.DataFrame,
        column: str,
        method: Optional[str] = None,
        **params: Any,
    ) -> ImputationResult:
        """
        Impute the outliers of numeric ``column`` with mean, median, mode or capping.

        Outliers are located by ``OutlierDetector`` (``rule`` / ``coef``
        params override the configuration). Missing values stay missing.
        """
        series = require_column(table, column)
        if not is_numeric(series):
            raise UnsupportedMethodError(f"Outlier imputation needs a numeric column, '{column}' is {series.dtype}")
        method = str(method or self.config.outlier_method).lower()
        self.factory.strategy_class(method, "numeric", "outlier")

        detector = OutlierDetector(
            rule=params.get("rule", self.outlier_config.rule),
            coef=params.get("coef", self.outlier_config.coef),
        )
        work = table.reset_index(drop=True)
        mask = pd.Series(detector.mask(work[column]), index=work.index)
        if not mask.any():
            self.logger.info(f"'{column}' has no outliers; nothing to impute")
            return ImputationResult(column, series, method, "outlier", {})

        plan = {
            "method": method,
            "capping_quantiles": params.get("capping_quantiles", self.outlier_config.capping_quantiles),
        }
        strategy = self.factory.make(column, plan, "numeric", "outlier")
        strategy.fit(work, mask)
        predictions = strategy.predict(work, mask)

        result = ImputationResult(
            column=column,
            original=series,
            method=method,
            kind="outlier",
            filled={int(i): _scalar(v) for i, v in predictions.items()},
        )
        self.report.init_row(column, "outlier", method, float(mask.mean()), int(work[column].notna().sum()))
        self.report.update(column, "outlier", {"n_filled": result.n_filled, "rule": detector.rule})
        self.logger.info(f"Imputed {result.n_filled} outlier(s) of '{column}' with {method}")
        return result

    def get_report(self) -> pd.DataFrame:
        return self.report.to_df()

    # ---- helpers ----
    def _plan(
        self,
        method: str,
        work: pd.DataFrame,
        column: str,
        target: Optional[str],
        seed: int,
        params: Dict[str, Any],
    ) -> Dict[str, Any]:
        predictors: Optional[List[str]] = params.get("predictors")
        if predictors is None:
            predictors = [c for c in work.columns if c not in (column, target)]
        else:
            unknown = [p for p in predictors if p not in work.columns]
            if unknown:
                raise ColumnNotFoundError(f"predictor(s) {unknown} not found in table")
            predictors = [p for p in predictors if p not in (column, target)]

        return {
            "method": method,
            "features": predictors,
            "seed": seed,
            "k": int(params.get("k", self.config.knn_neighbors)),
            "max_depth": params.get("max_depth", self.config.tree_max_depth),
            "max_iter": int(params.get("max_iter", self.config.mice_max_iter)),
            "m": int(params.get("m", 5)),
        }

    def _fallback(self, series: pd.Series, predictions: pd.Series, kind: str) -> pd.Series:
        """Fill rows the strategy could not predict with the column mean or mode."""
        missing = predictions.isna()
        if not missing.any():
            return predictions
        if kind == "numeric":
            value = float(series.astype(float).mean())
        else:
            value = get_mode(series)
        self.logger.warning(
            f"{int(missing.sum())} row(s) of '{series.name}' could not be predicted; "
            f"falling back to {'mean' if kind == 'numeric' else 'mode'}"
        )
        predictions = predictions.copy()
        predictions[missing] = value
        return predictions


def imputate_missing(
    table: pd.DataFrame,
    column: str,
    target: Optional[str] = None,
    method: Optional[str] = None,
    **params: Any,
) -> ImputationResult:
    """Module-level shortcut for ``Imputer().imputate_missing``."""
    return Imputer().imputate_missing(table, column, target=target, method=method, **params)


def imputate_outliers(
    table: pd.DataFrame,
    column: str,
    method: Optional[str] = None,
    **params: Any,
) -> ImputationResult:
    """Module-level shortcut for ``Imputer().imputate_outliers``."""
    return Imputer().imputate_outliers(table, column, method=method, **params)
