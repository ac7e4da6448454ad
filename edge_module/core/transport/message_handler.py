"""Handler de mensajes de lecturas."""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

from ..pipeline.processor import ProcessResult, ReadingPipeline
from ..validation.payload_validator import validate_reading

logger = logging.getLogger(__name__)


class MessageHandler:
    """Maneja mensajes de lecturas y los procesa a través del pipeline.
    
    Responsabilidades:
    - Parseo de JSON
    - Validación de contrato (pydantic) → Dominio
    - Delegación al pipeline
    
    Un mensaje malformado se descarta y se registra; nunca se propaga.
    """
    
    def __init__(self, pipeline: ReadingPipeline):
        self._pipeline = pipeline
        self._stats = pipeline.stats
    
    def handle(self, topic: str, payload: bytes) -> Optional[ProcessResult]:
        """Procesa un mensaje de lectura."""
        self._stats.incr("received")
        self._stats.last_message_at = time.time()
        
        try:
            # 1. Parsear JSON
            data = self._parse_json(payload, topic)
            if data is None:
                return None
            
            # 2. Validar y adaptar a modelo de dominio
            validation = validate_reading(data)
            if not validation.valid:
                logger.warning("[HANDLER] Invalid message dropped (topic=%s): %s", topic, validation.error)
                self._stats.incr("failed")
                return None
            
            # 3. Procesar lectura
            result = self._pipeline.process(validation.reading)
            
            # Log periódico
            if self._stats.received % 100 == 0:
                logger.info("[HANDLER] %s", self._stats)
            return result
                
        except Exception as e:
            logger.exception("[HANDLER] Error: %s", e)
            self._stats.incr("failed")
            return None
    
    def _parse_json(self, payload: bytes, topic: str) -> Optional[dict]:
        """Parsea payload JSON."""
        try:
            return json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("[HANDLER] Invalid JSON: %s (topic=%s)", e, topic)
            self._stats.incr("failed")
            return None
    
    @property
    def stats(self):
        return self._stats
