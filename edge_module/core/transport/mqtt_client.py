"""Cliente MQTT del módulo edge."""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

import paho.mqtt.client as mqtt
from paho.mqtt.packettypes import PacketTypes
from paho.mqtt.properties import Properties

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"


class MQTTClient:
    """Cliente MQTT ligero para lecturas y configuración.
    
    Responsabilidades:
    - Conexión/desconexión a broker MQTT
    - Suscripción a topic de lecturas y topic de configuración desired
    - Delegación de mensajes a handlers
    - Publicación JSON (telemetría reenviada, configuración reported)
    """
    
    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: str = "edge-module",
        input_topic: str = "edge/input1",
        desired_topic: str = "edge/config/desired",
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.username = username
        self.password = password
        self.client_id = f"{client_id}-{int(time.time())}"
        self.input_topic = input_topic
        self.desired_topic = desired_topic
        
        self._client: Optional[mqtt.Client] = None
        self._connected = False
        self._reading_handler: Optional[Callable[[str, bytes], None]] = None
        self._desired_handler: Optional[Callable[[Dict[str, Any]], None]] = None

        # Primer documento desired (retained) se reserva para el arranque
        self._desired_lock = threading.Lock()
        self._initial_event = threading.Event()
        self._initial_done = False
        self._initial_desired: Dict[str, Any] = {}
    
    def set_reading_handler(self, handler: Callable[[str, bytes], None]):
        """Configura el handler de lecturas."""
        self._reading_handler = handler

    def set_desired_handler(self, handler: Callable[[Dict[str, Any]], None]):
        """Configura el handler de pushes de configuración."""
        self._desired_handler = handler
    
    def connect(self) -> bool:
        """Conecta al broker MQTT."""
        try:
            self._client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=self.client_id,
                protocol=mqtt.MQTTv5,
            )
            
            self._client.on_connect = self._on_connect
            self._client.on_disconnect = self._on_disconnect
            self._client.on_message = self._on_message
            
            if self.username and self.password:
                self._client.username_pw_set(self.username, self.password)
            
            logger.info("[MQTT] Connecting to %s:%d", self.broker_host, self.broker_port)
            self._client.connect(self.broker_host, self.broker_port, keepalive=60)
            self._client.loop_start()
            
            # Esperar conexión
            for _ in range(50):
                if self._connected:
                    return True
                time.sleep(0.1)
            
            logger.error("[MQTT] Connection timeout")
            return False
            
        except Exception as e:
            logger.exception("[MQTT] Connection failed: %s", e)
            return False
    
    def disconnect(self):
        """Desconecta del broker."""
        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except Exception as e:
                logger.warning("[MQTT] Disconnect error: %s", e)
        self._connected = False

    def fetch_desired(self, timeout: float = 5.0) -> Dict[str, Any]:
        """Espera el documento desired retenido para el arranque.
        
        Si no llega en `timeout`, retorna {} (se aplicarán defaults) y los
        documentos posteriores van al handler de pushes.
        """
        if not self._initial_event.wait(timeout):
            logger.warning("[MQTT] No desired configuration within %.1fs - using defaults", timeout)
        with self._desired_lock:
            self._initial_done = True
            return dict(self._initial_desired)

    def publish_json(self, topic: str, data: Dict[str, Any], retain: bool = False) -> bool:
        """Publica un objeto JSON con content-type application/json."""
        if not self._client or not self._connected:
            logger.warning("[MQTT] Not connected - cannot publish to %s", topic)
            return False

        properties = Properties(PacketTypes.PUBLISH)
        properties.ContentType = CONTENT_TYPE_JSON

        info = self._client.publish(
            topic,
            json.dumps(data),
            qos=1,
            retain=retain,
            properties=properties,
        )
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.warning("[MQTT] Publish to %s failed: rc=%d", topic, info.rc)
            return False
        return True
    
    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code.is_failure:
            self._connected = False
            logger.error("[MQTT] Connection failed: %s", reason_code)
            return

        self._connected = True
        logger.info("[MQTT] Connected to broker")
        client.subscribe(self.input_topic, qos=1)
        client.subscribe(self.desired_topic, qos=1)
        logger.info("[MQTT] Subscribed to %s and %s", self.input_topic, self.desired_topic)
    
    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de desconexión."""
        self._connected = False
        logger.warning("[MQTT] Disconnected (%s)", reason_code)
    
    def _on_message(self, client, userdata, msg):
        """Callback de mensaje - delega según topic."""
        if mqtt.topic_matches_sub(self.desired_topic, msg.topic):
            self._handle_desired(msg.payload)
        elif self._reading_handler:
            self._reading_handler(msg.topic, msg.payload)
        else:
            logger.warning("[MQTT] No reading handler set - message on %s dropped", msg.topic)

    def _handle_desired(self, payload: bytes):
        try:
            doc = json.loads(payload.decode("utf-8")) if payload else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("[MQTT] Invalid desired configuration JSON: %s", e)
            return

        with self._desired_lock:
            if not self._initial_done:
                self._initial_desired = doc if isinstance(doc, dict) else {}
                self._initial_done = True
                self._initial_event.set()
                return

        if self._desired_handler:
            self._desired_handler(doc)
    
    @property
    def is_connected(self) -> bool:
        return self._connected
