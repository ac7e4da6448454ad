"""Motor de decisión: forward/drop + severidad.

Política (en este orden, ambas condiciones se evalúan siempre):
1. forward = is_anomaly, severity = WARNING
2. Si temperatura o humedad salen de su banda [lower, upper] (estricto:
   el valor exacto del límite está dentro de banda):
   forward = True, severity = CRITICAL
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from ..domain.module_config import ThresholdConfig
from ..domain.reading import ScoredReading
from ..domain.severity import Severity


class Violation(str, Enum):
    """Lado de la banda violado."""
    TEMP_HIGH = "temp-high"
    TEMP_LOW = "temp-low"
    HUM_HIGH = "hum-high"
    HUM_LOW = "hum-low"


@dataclass(frozen=True)
class Decision:
    """Resultado del motor de decisión."""
    forward: bool
    severity: Severity
    violations: Tuple[Violation, ...] = field(default_factory=tuple)

    @property
    def band_violated(self) -> bool:
        return bool(self.violations)

    def __str__(self) -> str:
        if not self.forward:
            return "drop"
        reasons = ",".join(v.value for v in self.violations) or "anomaly"
        return f"forward({self.severity.name},{reasons})"


def band_violations(scored: ScoredReading, thresholds: ThresholdConfig) -> Tuple[Violation, ...]:
    """Lista los lados de banda violados. NaN compara como dentro de banda."""
    violations = []
    if scored.temperature > thresholds.temp_upper:
        violations.append(Violation.TEMP_HIGH)
    if scored.temperature < thresholds.temp_lower:
        violations.append(Violation.TEMP_LOW)
    if scored.humidity > thresholds.hum_upper:
        violations.append(Violation.HUM_HIGH)
    if scored.humidity < thresholds.hum_lower:
        violations.append(Violation.HUM_LOW)
    return tuple(violations)


def decide(scored: ScoredReading, thresholds: ThresholdConfig) -> Decision:
    """Combina flag de anomalía y banda de umbrales en una decisión."""
    forward = scored.is_anomaly
    severity = Severity.WARNING

    violations = band_violations(scored, thresholds)
    if violations:
        forward = True
        severity = Severity.CRITICAL

    return Decision(forward=forward, severity=severity, violations=violations)
