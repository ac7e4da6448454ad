"""Validación de payloads entrantes."""

from .payload_validator import ReadingPayload, ValidationResult, validate_reading

__all__ = ["ReadingPayload", "ValidationResult", "validate_reading"]
