"""Cliente de actuación HTTP."""

from .client import ActuationClient
from .results import ActuationFailure, ActuationResult

__all__ = ["ActuationClient", "ActuationFailure", "ActuationResult"]
