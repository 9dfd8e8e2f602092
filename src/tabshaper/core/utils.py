"""Core utilities for logging, seeding, column typing, and configuration management."""

from __future__ import annotations

import hashlib
import json
import logging
import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union

import numpy as np
import pandas as pd
import yaml
from pydantic import BaseModel, Field, field_validator

from tabshaper.core.exceptions import ColumnNotFoundError


class LoggerFactory:
    """Named loggers writing to stdout with one shared format."""

    _loggers: Dict[str, logging.Logger] = {}

    @classmethod
    def get_logger(cls, name: str, level: int = logging.INFO) -> logging.Logger:
        """Get or create a logger with standard formatting."""
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            logger.setLevel(level)

            # Don't add handlers if they already exist
            if not logger.handlers:
                handler = logging.StreamHandler(sys.stdout)
                formatter = logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                )
                handler.setFormatter(formatter)
                logger.addHandler(handler)

            cls._loggers[name] = logger

        return cls._loggers[name]

    @classmethod
    def set_level(cls, level: Union[int, str]) -> None:
        """Change the level of every logger created so far."""
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        for logger in cls._loggers.values():
            logger.setLevel(level)


class SeedManager:
    """Manages global random seeds for reproducibility."""

    _current_seed: Optional[int] = None

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set global random seed for random and numpy."""
        cls._current_seed = seed
        random.seed(seed)
        np.random.seed(seed)

    @classmethod
    def get_seed(cls) -> Optional[int]:
        """Get current seed."""
        return cls._current_seed

    @classmethod
    def resolve(cls, seed: Optional[int], default: int = 42) -> int:
        """Explicit seed first, then the global one, then ``default``."""
        if seed is not None:
            return int(seed)
        if cls._current_seed is not None:
            return cls._current_seed
        return default


class Timer:
    """Context manager for timing operations."""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = datetime.now().timestamp()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = datetime.now().timestamp() - self.start_time
            self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s")


# ---- column helpers ----

_NUMERIC_KINDS = ("i", "u", "f")


def is_numeric(series: pd.Series) -> bool:
    """Numeric means an int/uint/float dtype; booleans count as categorical."""
    return series.dtype.kind in _NUMERIC_KINDS


def require_column(table: pd.DataFrame, column: str, role: str = "column") -> pd.Series:
    if not isinstance(table, pd.DataFrame):
        raise TypeError(f"expected a pandas DataFrame, got {type(table).__name__}")
    if column not in table.columns:
        raise ColumnNotFoundError(f"{role} '{column}' not found in table")
    return table[column]


# ---- configuration schemas ----

class ImputationConfig(BaseModel):
    """Defaults for missing-value and outlier imputation."""
    numeric_method: str = Field("mean", description="Default method for numeric columns")
    categorical_method: str = Field("mode", description="Default method for categorical columns")
    outlier_method: str = Field("capping", description="Default outlier imputation method")
    knn_neighbors: int = Field(5, ge=1)
    mice_max_iter: int = Field(10, ge=1)
    tree_max_depth: Optional[int] = Field(None, ge=1)
    seed: int = Field(42, description="Seed passed to model-based collaborators")


class OutlierConfig(BaseModel):
    rule: str = Field("iqr", description="Outlier rule: iqr or zscore")
    coef: Optional[float] = Field(None, gt=0, description="Fence multiplier; rule default when unset")
    capping_quantiles: Tuple[float, float] = Field((0.05, 0.95))

    @field_validator("rule")
    @classmethod
    def _check_rule(cls, v: str) -> str:
        v = v.lower()
        if v not in {"iqr", "zscore"}:
            raise ValueError(f"unknown outlier rule '{v}'")
        return v


class TransformConfig(BaseModel):
    skew_threshold: float = Field(0.5, ge=0, description="|skewness| above which a column is transformed")
    method: str = Field("auto", description="Transform for skewed columns, or 'auto'")


class BinningConfig(BaseModel):
    type: str = Field("quantile", description="Unsupervised binning type")
    n_bins: Optional[int] = Field(None, ge=1, description="Sturges' rule when unset")
    n_bootstrap: int = Field(10, ge=1)
    base_centers: int = Field(20, ge=2)
    max_bins: int = Field(6, ge=2, description="Max intervals for optimal binning")
    min_bin_pct: float = Field(0.05, gt=0, lt=0.5)
    monotonic: bool = True
    seed: int = 42


class ReportConfig(BaseModel):
    title: str = "Transformation Report"
    output_dir: str = Field(".", description="Directory for default report paths")
    output_format: str = "pdf"
    n_jobs: int = Field(1, description="joblib workers for per-column processing")
    plots: bool = True


class ToolkitConfig(BaseModel):
    """Top-level configuration, one section per component."""
    imputation: ImputationConfig = Field(default_factory=ImputationConfig)
    outliers: OutlierConfig = Field(default_factory=OutlierConfig)
    transform: TransformConfig = Field(default_factory=TransformConfig)
    binning: BinningConfig = Field(default_factory=BinningConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging_level: str = "INFO"

    def to_dict(self) -> dict:
        return self.model_dump()


class ConfigManager:
    """Loads YAML configuration files and validates them into pydantic models."""

    def __init__(self, config_dir: Union[str, Path]):
        self.config_dir = Path(config_dir)
        self._cache: Dict[str, Any] = {}

    def load_config(self, config_name: str, use_cache: bool = True) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if use_cache and config_name in self._cache:
            return self._cache[config_name]

        config_path = Path(config_name)
        # Use config_name directly if it's absolute or already points inside config_dir
        if not config_path.is_absolute() and not config_path.exists():
            config_path = self.config_dir / config_path
        if config_path.suffix not in (".yaml", ".yml"):
            config_path = config_path.with_suffix(".yaml")
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_path.open("r") as f:
            config = yaml.safe_load(f) or {}

        if use_cache:
            self._cache[config_name] = config

        return config

    def get_config_hash(self, config: Dict[str, Any]) -> str:
        """MD5 of the configuration, stable under key order."""
        config_str = json.dumps(config, sort_keys=True, default=str)
        return hashlib.md5(config_str.encode()).hexdigest()

    def validate_config(self, config: Dict[str, Any], schema: Type[BaseModel]) -> BaseModel:
        """Validate configuration against Pydantic schema."""
        return schema(**config)

    def load_toolkit_config(self, config_name: str = "report") -> ToolkitConfig:
        return self.validate_config(self.load_config(config_name), ToolkitConfig)
