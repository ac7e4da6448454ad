"""Modelos de dominio."""

from .reading import Reading, ScoredReading
from .severity import ActuationCommand, Severity
from .module_config import ClassifierParams, ModuleConfig, ThresholdConfig

__all__ = [
    "Reading",
    "ScoredReading",
    "Severity",
    "ActuationCommand",
    "ThresholdConfig",
    "ClassifierParams",
    "ModuleConfig",
]
