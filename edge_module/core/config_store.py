"""Store de configuración compartida.

Guarda un único estado inmutable (ModuleConfig + cliente de actuación ligado
a su endpoint) protegido por un lock. Los lectores siempre ven un estado
completo: nunca un tempUpper nuevo con un tempLower viejo, ni umbrales
nuevos con el actuador del endpoint anterior.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from .actuation.client import ActuationClient
from .domain.module_config import ClassifierParams, ModuleConfig, ThresholdConfig

logger = logging.getLogger(__name__)

# Centinela: replace() sin actuador conserva el vigente
_KEEP: Any = object()


@dataclass(frozen=True)
class StoreState:
    """Snapshot de configuración y el actuador que le corresponde."""
    config: ModuleConfig
    actuator: Optional[ActuationClient] = None


class ConfigurationStore:
    """Handle thread-safe a la configuración vigente del proceso.

    Se crea una vez al arrancar y se pasa por referencia al pipeline y al
    sincronizador.
    """

    def __init__(
        self,
        initial: Optional[ModuleConfig] = None,
        actuator: Optional[ActuationClient] = None,
    ):
        self._lock = threading.Lock()
        self._state = StoreState(config=initial or ModuleConfig(), actuator=actuator)

    def state(self) -> StoreState:
        """Retorna configuración y actuador como una sola unidad."""
        with self._lock:
            return self._state

    def snapshot(self) -> ModuleConfig:
        """Retorna el snapshot de configuración vigente."""
        return self.state().config

    def replace(self, config: ModuleConfig, actuator: Optional[ActuationClient] = _KEEP) -> ModuleConfig:
        """Reemplaza atómicamente configuración (y actuador, si se indica).

        Returns:
            El snapshot de configuración anterior
        """
        with self._lock:
            previous = self._state
            self._state = StoreState(
                config=config,
                actuator=previous.actuator if actuator is _KEEP else actuator,
            )

        if not config.thresholds.is_consistent:
            logger.warning(
                "[STORE] Inconsistent threshold band adopted: temp=[%s, %s] hum=[%s, %s]",
                config.thresholds.temp_lower,
                config.thresholds.temp_upper,
                config.thresholds.hum_lower,
                config.thresholds.hum_upper,
            )
        return previous.config

    @property
    def actuator(self) -> Optional[ActuationClient]:
        return self.state().actuator

    @property
    def thresholds(self) -> ThresholdConfig:
        return self.snapshot().thresholds

    @property
    def classifier_params(self) -> ClassifierParams:
        return self.snapshot().classifier
