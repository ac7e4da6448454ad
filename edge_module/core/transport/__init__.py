"""Adaptadores de transporte (MQTT)."""

from .message_handler import MessageHandler
from .mqtt_client import MQTTClient
from .publishers import MQTTConfigReporter, MQTTTelemetryPublisher, ReportError

__all__ = [
    "MessageHandler",
    "MQTTClient",
    "MQTTConfigReporter",
    "MQTTTelemetryPublisher",
    "ReportError",
]
