"""Clasificación de lecturas y motor de decisión."""

from .anomaly_classifier import ZSCORE_CUTOFF, classify, z_score
from .decision_engine import Decision, Violation, decide

__all__ = [
    "ZSCORE_CUTOFF",
    "classify",
    "z_score",
    "Decision",
    "Violation",
    "decide",
]
