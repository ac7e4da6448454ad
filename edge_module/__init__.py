"""Módulo edge de decisión de telemetría (temperatura / humedad)."""

__version__ = "0.1.0"
