"""Estadísticas de procesamiento."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Stats:
    """Contadores de mensajes y decisiones."""
    
    received: int = 0
    forwarded: int = 0
    dropped: int = 0
    failed: int = 0
    actuations_ok: int = 0
    actuations_failed: int = 0
    last_message_at: float = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def incr(self, name: str, amount: int = 1):
        """Incrementa un contador (el transport puede despachar en paralelo)."""
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)
    
    def __str__(self) -> str:
        return (
            f"Stats: received={self.received} forwarded={self.forwarded} "
            f"dropped={self.dropped} failed={self.failed} "
            f"actuations_ok={self.actuations_ok} actuations_failed={self.actuations_failed}"
        )
    
    def to_dict(self) -> dict:
        """Convierte a diccionario."""
        return {
            "received": self.received,
            "forwarded": self.forwarded,
            "dropped": self.dropped,
            "failed": self.failed,
            "actuations_ok": self.actuations_ok,
            "actuations_failed": self.actuations_failed,
            "last_message_at": self.last_message_at,
            "started_at": self.started_at.isoformat(),
            "success_rate": self._success_rate(),
        }
    
    def _success_rate(self) -> float:
        """Calcula tasa de éxito."""
        total = self.forwarded + self.dropped + self.failed
        if total == 0:
            return 1.0
        return (self.forwarded + self.dropped) / total
