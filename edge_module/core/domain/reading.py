"""Modelo de dominio para lecturas ambientales."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Reading:
    """Lectura de temperatura/humedad - inmutable una vez recibida.
    
    Este es el contrato que fluye por el pipeline:
    MQTT → Validación → Clasificador → Decisión → Forward/Actuación
    """
    temperature: float
    humidity: float
    observed_at: datetime


@dataclass(frozen=True)
class ScoredReading:
    """Lectura con el flag de anomalía calculado por el clasificador."""
    temperature: float
    humidity: float
    observed_at: datetime
    is_anomaly: bool

    @classmethod
    def from_reading(cls, reading: Reading, is_anomaly: bool) -> "ScoredReading":
        return cls(
            temperature=reading.temperature,
            humidity=reading.humidity,
            observed_at=reading.observed_at,
            is_anomaly=is_anomaly,
        )

    def to_message(self) -> dict:
        """Convierte al formato JSON de salida (mismo shape que la entrada + isAnomaly)."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "timeCreated": self.observed_at.isoformat(),
            "isAnomaly": self.is_anomaly,
        }
