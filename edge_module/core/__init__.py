"""Core del módulo edge.

- domain/          → Modelos (lecturas, severidad, configuración)
- classification/  → Clasificador z-score y motor de decisión
- actuation/       → Cliente HTTP de actuación
- sync/            → Sincronización desired/reported
- pipeline/        → Orquestación por lectura
- transport/       → Cliente MQTT y handler de mensajes
"""
