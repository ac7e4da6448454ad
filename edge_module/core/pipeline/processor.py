"""Procesador de lecturas: clasificar → decidir → forward → actuar."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..actuation.client import ActuationClient
from ..actuation.results import ActuationFailure, ActuationResult
from ..classification.anomaly_classifier import classify
from ..classification.decision_engine import Decision, decide
from ..config_store import ConfigurationStore
from ..domain.reading import Reading, ScoredReading
from ..domain.severity import ActuationCommand
from ..monitoring.stats import Stats

logger = logging.getLogger(__name__)


class TelemetryPublisher(Protocol):
    """Colaborador que reemite la lectura puntuada hacia el colector remoto."""

    def publish(self, scored: ScoredReading) -> bool:
        """Retorna True si el transport aceptó el mensaje."""
        ...


@dataclass(frozen=True)
class ProcessResult:
    """Resultado del procesamiento de una lectura."""
    scored: ScoredReading
    decision: Decision
    forwarded: bool = False
    actuation: Optional[ActuationResult] = None


class ReadingPipeline:
    """Motor de decisión aplicado a cada lectura entrante.
    
    Efectos cuando la decisión es forward:
    a) reemitir la lectura puntuada (siempre)
    b) si hay endpoint configurado, enviar comando de actuación
    
    (a) y (b) son independientes: el fallo de uno no bloquea ni deshace el otro.
    Ningún error se propaga al llamador.
    """

    def __init__(
        self,
        store: ConfigurationStore,
        publisher: TelemetryPublisher,
        stats: Optional[Stats] = None,
    ):
        self._store = store
        self._publisher = publisher
        self._stats = stats or Stats()

    def process(self, reading: Reading) -> ProcessResult:
        """Procesa una lectura con un único snapshot de configuración y actuador."""
        state = self._store.state()
        config = state.config

        scored = ScoredReading.from_reading(reading, classify(reading, config.classifier))
        decision = decide(scored, config.thresholds)

        if not decision.forward:
            self._stats.incr("dropped")
            logger.info(
                "[PIPELINE] Dropped %s | %s | anomaly=%s",
                scored.temperature,
                scored.humidity,
                scored.is_anomaly,
            )
            return ProcessResult(scored=scored, decision=decision)

        forwarded = self._forward(scored)

        actuation = None
        if config.thresholds.actuation_endpoint:
            command = ActuationCommand(
                temperature=reading.temperature,
                humidity=reading.humidity,
                severity=decision.severity,
            )
            actuation = self._actuate(state.actuator, command)

        logger.info(
            "[PIPELINE] %s %s | %s | anomaly=%s forwarded=%s actuation=%s",
            decision,
            scored.temperature,
            scored.humidity,
            scored.is_anomaly,
            forwarded,
            None if actuation is None else actuation.success,
        )
        return ProcessResult(
            scored=scored,
            decision=decision,
            forwarded=forwarded,
            actuation=actuation,
        )

    def _forward(self, scored: ScoredReading) -> bool:
        try:
            forwarded = bool(self._publisher.publish(scored))
        except Exception as e:
            logger.error("[PIPELINE] Telemetry forward failed: %s", e)
            forwarded = False

        self._stats.incr("forwarded" if forwarded else "failed")
        return forwarded

    def _actuate(
        self, actuator: Optional[ActuationClient], command: ActuationCommand
    ) -> Optional[ActuationResult]:
        if actuator is None:
            logger.debug("[PIPELINE] No actuation client bound - skipping")
            return None

        try:
            result = actuator.notify(command)
        except Exception as e:
            logger.error("[PIPELINE] Actuation client raised: %s", e)
            result = ActuationResult.failed(ActuationFailure.TRANSPORT, str(e))

        self._stats.incr("actuations_ok" if result.success else "actuations_failed")
        return result

    @property
    def stats(self) -> Stats:
        return self._stats
