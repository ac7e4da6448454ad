"""Campos reconocidos del documento de configuración.

Cada campo sabe resolverse contra un documento desired:
- presente, no nulo y no cero (numéricos) / no vacío (endpoint) → se adopta
- en otro caso → default hardcoded
- tipo incompatible → InvalidFieldError
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union

from ..domain import module_config as defaults
from ..domain.module_config import ClassifierParams, ModuleConfig, ThresholdConfig

FieldValue = Union[float, str]


class InvalidFieldError(ValueError):
    """Valor de campo con tipo incompatible."""

    def __init__(self, key: str, value: Any):
        super().__init__(f"invalid value for {key!r}: {value!r}")
        self.key = key
        self.value = value


@dataclass(frozen=True)
class ConfigField:
    key: str
    section: str  # "thresholds" | "classifier"
    attr: str
    default: FieldValue

    @property
    def is_numeric(self) -> bool:
        return not isinstance(self.default, str)

    def resolve(self, desired: Mapping[str, Any]) -> FieldValue:
        raw = desired.get(self.key)
        if raw is None:
            return self.default
        if self.is_numeric:
            return self._resolve_number(raw)
        return self._resolve_text(raw)

    def _resolve_number(self, raw: Any) -> float:
        # bool es subclase de int: no es un umbral válido
        if isinstance(raw, bool):
            raise InvalidFieldError(self.key, raw)
        if isinstance(raw, (int, float)):
            value = float(raw)
        elif isinstance(raw, str):
            try:
                value = float(raw.strip())
            except ValueError:
                raise InvalidFieldError(self.key, raw) from None
        else:
            raise InvalidFieldError(self.key, raw)

        if not math.isfinite(value):
            raise InvalidFieldError(self.key, raw)
        if value == 0.0:
            return float(self.default)
        return value

    def _resolve_text(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise InvalidFieldError(self.key, raw)
        value = raw.strip()
        return value or str(self.default)


CONFIG_FIELDS: Tuple[ConfigField, ...] = (
    ConfigField("tempUpper", "thresholds", "temp_upper", defaults.DEFAULT_TEMP_UPPER),
    ConfigField("tempLower", "thresholds", "temp_lower", defaults.DEFAULT_TEMP_LOWER),
    ConfigField("humUpper", "thresholds", "hum_upper", defaults.DEFAULT_HUM_UPPER),
    ConfigField("humLower", "thresholds", "hum_lower", defaults.DEFAULT_HUM_LOWER),
    ConfigField("actuationEndpoint", "thresholds", "actuation_endpoint", defaults.DEFAULT_ACTUATION_ENDPOINT),
    ConfigField("TemperatureMeanValue", "classifier", "temp_mean", defaults.DEFAULT_TEMP_MEAN),
    ConfigField("TemperatureStdDeviation", "classifier", "temp_stddev", defaults.DEFAULT_TEMP_STDDEV),
    ConfigField("HumidityMeanValue", "classifier", "hum_mean", defaults.DEFAULT_HUM_MEAN),
    ConfigField("HumidityStdDeviation", "classifier", "hum_stddev", defaults.DEFAULT_HUM_STDDEV),
)

RECOGNIZED_KEYS = frozenset(f.key for f in CONFIG_FIELDS)


def resolve_document(desired: Mapping[str, Any]) -> Dict[str, FieldValue]:
    """Resuelve todos los campos reconocidos (reemplazo completo, no merge)."""
    return {f.key: f.resolve(desired) for f in CONFIG_FIELDS}


def document_to_config(resolved: Mapping[str, FieldValue]) -> ModuleConfig:
    sections: Dict[str, Dict[str, FieldValue]] = {"thresholds": {}, "classifier": {}}
    for f in CONFIG_FIELDS:
        sections[f.section][f.attr] = resolved[f.key]
    return ModuleConfig(
        thresholds=ThresholdConfig(**sections["thresholds"]),
        classifier=ClassifierParams(**sections["classifier"]),
    )


def config_to_document(config: ModuleConfig) -> Dict[str, FieldValue]:
    """Documento plano con los campos reconocidos y sus valores efectivos."""
    doc = {}
    for f in CONFIG_FIELDS:
        section = config.thresholds if f.section == "thresholds" else config.classifier
        doc[f.key] = getattr(section, f.attr)
    return doc
