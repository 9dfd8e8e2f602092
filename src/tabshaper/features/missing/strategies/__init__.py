"""Imputation strategies: constant statistics, capping and model-based fills."""
from tabshaper.features.missing.strategies.capping import CappingStrategy
from tabshaper.features.missing.strategies.mice import ChainedEquationsStrategy
from tabshaper.features.missing.strategies.model import ModelImputerStrategy
from tabshaper.features.missing.strategies.simple import ConstantStatStrategy

__all__ = [
    "CappingStrategy",
    "ChainedEquationsStrategy",
    "ConstantStatStrategy",
    "ModelImputerStrategy",
]
