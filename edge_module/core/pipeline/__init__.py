"""Pipeline de decisión por lectura."""

from .processor import ProcessResult, ReadingPipeline, TelemetryPublisher

__all__ = ["ProcessResult", "ReadingPipeline", "TelemetryPublisher"]
