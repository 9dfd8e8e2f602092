"""Standardisation and skewness-correcting transforms."""
from tabshaper.features.transforms.transformer import (
    METHODS,
    TransformResult,
    Transformer,
    suggest_method,
    transform,
)

__all__ = ["METHODS", "TransformResult", "Transformer", "suggest_method", "transform"]
