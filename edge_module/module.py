"""Módulo edge - punto de entrada principal.

Usa la arquitectura modular:
- core/transport/      → Cliente MQTT y handler de mensajes
- core/sync/           → Configuración desired/reported
- core/pipeline/       → Clasificación, decisión, forward y actuación
- core/monitoring/     → Stats
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import Settings, get_settings
from .core.config_store import ConfigurationStore
from .core.monitoring.stats import Stats
from .core.pipeline.processor import ReadingPipeline
from .core.sync.synchronizer import ConfigurationSynchronizer
from .core.transport.message_handler import MessageHandler
from .core.transport.mqtt_client import MQTTClient
from .core.transport.publishers import MQTTConfigReporter, MQTTTelemetryPublisher

logger = logging.getLogger(__name__)


class EdgeModule:
    """Módulo edge con arquitectura modular.
    
    Componentes:
    - ConfigurationStore: snapshot de configuración compartido
    - ConfigurationSynchronizer: desired → store → reported
    - ReadingPipeline: motor de decisión por lectura
    - MessageHandler: parseo y delegación
    - MQTTClient: conexión, suscripción y publicación
    """
    
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._store = ConfigurationStore()
        self._stats = Stats()
        self._synchronizer = ConfigurationSynchronizer(
            self._store,
            actuation_timeout=self._settings.actuation_timeout_seconds,
        )
        self._mqtt: Optional[MQTTClient] = None
        self._handler: Optional[MessageHandler] = None
        self._ready = False
        self._running = False
    
    def start(self) -> bool:
        """Inicia el módulo."""
        s = self._settings
        try:
            # 1. Crear cliente MQTT
            self._mqtt = MQTTClient(
                broker_host=s.mqtt_host,
                broker_port=s.mqtt_port,
                username=s.mqtt_username,
                password=s.mqtt_password,
                client_id=s.module_id,
                input_topic=s.input_topic,
                desired_topic=s.desired_topic,
            )

            # 2. Crear pipeline y handler
            pipeline = ReadingPipeline(
                self._store,
                MQTTTelemetryPublisher(self._mqtt, s.output_topic),
                stats=self._stats,
            )
            self._handler = MessageHandler(pipeline)
            self._synchronizer.set_reporter(MQTTConfigReporter(self._mqtt, s.reported_topic))
            self._mqtt.set_desired_handler(self._synchronizer.apply_desired)
            self._mqtt.set_reading_handler(self._on_reading)
            
            # 3. Conectar MQTT
            if not self._mqtt.connect():
                logger.error("[MODULE] MQTT connection failed")
                return False
            
            # 4. Configuración inicial antes de aceptar lecturas
            desired = self._mqtt.fetch_desired(s.desired_fetch_timeout_seconds)
            self._synchronizer.initialize(desired)
            self._ready = True
            
            self._running = True
            logger.info("[MODULE] Edge module client initialized (input=%s)", s.input_topic)
            return True
            
        except Exception as e:
            logger.exception("[MODULE] Start failed: %s", e)
            return False
    
    def _on_reading(self, topic: str, payload: bytes):
        """Lecturas previas a la configuración inicial se descartan."""
        if not self._ready or self._handler is None:
            self._stats.incr("received")
            self._stats.incr("dropped")
            logger.warning("[MODULE] Reading on %s before initial configuration - dropped", topic)
            return
        self._handler.handle(topic, payload)

    def stop(self):
        """Detiene el módulo."""
        self._running = False
        self._ready = False
        
        if self._mqtt:
            self._mqtt.disconnect()
        
        logger.info("[MODULE] Stopped. %s", self._stats)
    
    @property
    def store(self) -> ConfigurationStore:
        return self._store

    @property
    def synchronizer(self) -> ConfigurationSynchronizer:
        return self._synchronizer

    @property
    def is_running(self) -> bool:
        return self._running
    
    @property
    def is_connected(self) -> bool:
        return self._mqtt.is_connected if self._mqtt else False
    
    @property
    def stats(self) -> dict:
        """Estadísticas del módulo."""
        return {
            "running": self._running,
            "connected": self.is_connected,
            **self._stats.to_dict(),
        }
    
    def health_check(self) -> dict:
        """Health check del módulo."""
        if not self._handler:
            return {"healthy": False, "reason": "Not initialized"}

        actuator = self._synchronizer.current_actuator()
        return {
            "healthy": self._running and self.is_connected,
            "mqtt_connected": self.is_connected,
            "actuation_endpoint": actuator.endpoint if actuator else None,
            "messages_forwarded": self._stats.forwarded,
            "messages_failed": self._stats.failed,
        }
