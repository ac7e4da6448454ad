"""Validador de payloads de lecturas entrantes.

Formato esperado:
{
    "temperature": 21.5,
    "humidity": 48.0,
    "timeCreated": "2026-01-31T08:00:00.123456Z"
}

Campos extra se ignoran. Faltantes o inválidos → error por mensaje.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..domain.reading import Reading

logger = logging.getLogger(__name__)


class ReadingPayload(BaseModel):
    """Schema de validación para lecturas de temperatura/humedad."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    temperature: float
    humidity: float
    time_created: datetime = Field(..., alias="timeCreated")

    def to_reading(self) -> Reading:
        """Convierte al modelo de dominio."""
        return Reading(
            temperature=self.temperature,
            humidity=self.humidity,
            observed_at=self.time_created,
        )


@dataclass
class ValidationResult:
    """Resultado de validación."""
    
    valid: bool
    payload: Optional[ReadingPayload] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def reading(self) -> Optional[Reading]:
        return self.payload.to_reading() if self.payload else None


def validate_reading(data: Any) -> ValidationResult:
    """Valida un payload de lectura ya decodificado de JSON.
    
    Args:
        data: Objeto JSON del mensaje
        
    Returns:
        ValidationResult con payload validado o error
    """
    if not isinstance(data, dict):
        return ValidationResult(valid=False, error=f"expected JSON object, got {type(data).__name__}")

    warnings = []
    if "timeCreated" not in data and "time_created" in data:
        warnings.append("Used snake_case time_created instead of timeCreated")

    try:
        payload = ReadingPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("[VALIDATOR] Validation failed: %s", e.errors(include_url=False))
        return ValidationResult(valid=False, error=str(e))

    return ValidationResult(valid=True, payload=payload, warnings=warnings)
