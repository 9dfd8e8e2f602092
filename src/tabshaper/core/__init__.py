"""Core interfaces and utilities."""

from .exceptions import *
from .interfaces import *
from .utils import *

__all__ = [
    "ImputationStrategy",
    "EstimatorFactory",
    "FeaturePreprocessor",
    "ReportRenderer",
    "TabshaperError",
    "UnsupportedMethodError",
    "MissingTargetError",
    "DegenerateRangeError",
    "TransformDomainError",
    "NonBinaryTargetError",
    "LabelCountMismatchError",
    "UnsupportedOutputFormatError",
    "RenderError",
    "ColumnNotFoundError",
    "LoggerFactory",
    "SeedManager",
    "ConfigManager",
    "Timer",
    "is_numeric",
    "require_column",
    "ImputationConfig",
    "OutlierConfig",
    "TransformConfig",
    "BinningConfig",
    "ReportConfig",
    "ToolkitConfig",
]
