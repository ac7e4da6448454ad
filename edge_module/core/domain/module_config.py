"""Configuración de umbrales y del clasificador.

Ambas estructuras viajan en el mismo documento de configuración
(desired/reported) y se publican juntas como un snapshot inmutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Valores por defecto cuando el documento no trae el campo
DEFAULT_TEMP_UPPER = 35.0
DEFAULT_TEMP_LOWER = 10.0
DEFAULT_HUM_UPPER = 90.0
DEFAULT_HUM_LOWER = 30.0
DEFAULT_ACTUATION_ENDPOINT = "http://localhost:3000/"

# La banda por defecto queda en ±3σ alrededor de su punto medio
DEFAULT_TEMP_MEAN = (DEFAULT_TEMP_UPPER + DEFAULT_TEMP_LOWER) / 2
DEFAULT_TEMP_STDDEV = (DEFAULT_TEMP_UPPER - DEFAULT_TEMP_LOWER) / 6
DEFAULT_HUM_MEAN = (DEFAULT_HUM_UPPER + DEFAULT_HUM_LOWER) / 2
DEFAULT_HUM_STDDEV = (DEFAULT_HUM_UPPER - DEFAULT_HUM_LOWER) / 6


@dataclass(frozen=True)
class ThresholdConfig:
    """Banda aceptable [lower, upper] por canal + endpoint de actuación.
    
    lower <= upper es deseable pero no se impone: un operador puede
    enviar valores inconsistentes y el motor solo compara.
    """
    temp_upper: float = DEFAULT_TEMP_UPPER
    temp_lower: float = DEFAULT_TEMP_LOWER
    hum_upper: float = DEFAULT_HUM_UPPER
    hum_lower: float = DEFAULT_HUM_LOWER
    actuation_endpoint: str = DEFAULT_ACTUATION_ENDPOINT

    @property
    def is_consistent(self) -> bool:
        return self.temp_lower <= self.temp_upper and self.hum_lower <= self.hum_upper


@dataclass(frozen=True)
class ClassifierParams:
    """Parámetros del modelo z-score (suministrados externamente, no aprendidos)."""
    temp_mean: float = DEFAULT_TEMP_MEAN
    temp_stddev: float = DEFAULT_TEMP_STDDEV
    hum_mean: float = DEFAULT_HUM_MEAN
    hum_stddev: float = DEFAULT_HUM_STDDEV


@dataclass(frozen=True)
class ModuleConfig:
    """Snapshot completo de configuración vigente."""
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    classifier: ClassifierParams = field(default_factory=ClassifierParams)
