"""Publicadores MQTT: telemetría reenviada y configuración reported."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..domain.reading import ScoredReading
from .mqtt_client import MQTTClient

logger = logging.getLogger(__name__)


class ReportError(RuntimeError):
    """No se pudo publicar la configuración reported."""


class MQTTTelemetryPublisher:
    """Reemite lecturas puntuadas al topic de salida."""

    def __init__(self, client: MQTTClient, topic: str):
        self._client = client
        self._topic = topic

    def publish(self, scored: ScoredReading) -> bool:
        ok = self._client.publish_json(self._topic, scored.to_message())
        if ok:
            logger.debug("[MQTT] Scored reading sent to %s", self._topic)
        return ok


class MQTTConfigReporter:
    """Publica la configuración efectiva (retenida) en el topic reported."""

    def __init__(self, client: MQTTClient, topic: str):
        self._client = client
        self._topic = topic

    def report(self, reported: Dict[str, Any]) -> None:
        if not self._client.publish_json(self._topic, reported, retain=True):
            raise ReportError(f"could not publish reported configuration to {self._topic}")
        logger.info("[MQTT] Reported configuration sent to %s", self._topic)
