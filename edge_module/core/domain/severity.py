"""Severidad de escalado y comando de actuación."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    """Nivel de escalado. El orden es significativo: DEBUG < INFO < WARNING < CRITICAL."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    CRITICAL = 3


@dataclass(frozen=True)
class ActuationCommand:
    """Comando enviado al actuador externo.
    
    Se construye con los valores de la lectura original, nunca con los umbrales.
    """
    temperature: float
    humidity: float
    severity: Severity

    def to_payload(self) -> dict:
        """Body JSON del POST: commandLevel es el ordinal 0-3."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "commandLevel": int(self.severity),
        }
