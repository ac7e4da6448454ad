"""Clasificador de anomalías por z-score.

Función pura: solo lee los parámetros recibidos, no tiene estado y puede
llamarse en paralelo desde varias lecturas en vuelo.
"""

from __future__ import annotations

import math

from ..domain.module_config import ClassifierParams
from ..domain.reading import Reading

# Corte en desviaciones estándar (estricto: 3.0 exacto NO es anomalía)
ZSCORE_CUTOFF = 3.0


def z_score(value: float, mean: float, stddev: float) -> float:
    """Magnitud |value - mean| / stddev.
    
    - stddev == 0: valor igual a la media → 0.0, cualquier otro → inf
    - stddev negativo se toma en magnitud
    - NaN en cualquier entrada → NaN (el llamador lo resuelve)
    """
    if math.isnan(value) or math.isnan(mean) or math.isnan(stddev):
        return math.nan

    deviation = abs(value - mean)
    spread = abs(stddev)
    if spread == 0.0:
        return 0.0 if deviation == 0.0 else math.inf
    return deviation / spread


def _exceeds(z: float) -> bool:
    # NaN nunca supera el corte: default conservador, no garantía de corrección
    return not math.isnan(z) and z > ZSCORE_CUTOFF


def classify(reading: Reading, params: ClassifierParams) -> bool:
    """Retorna True si temperatura o humedad superan el corte z-score.
    
    Nunca lanza: entradas indefinidas/NaN resultan en no-anomalía para no
    romper el pipeline.
    """
    try:
        temp_z = z_score(float(reading.temperature), params.temp_mean, params.temp_stddev)
        hum_z = z_score(float(reading.humidity), params.hum_mean, params.hum_stddev)
    except (TypeError, ValueError):
        return False

    return _exceeds(temp_z) or _exceeds(hum_z)
