"""Sincronizador de configuración desired → store → reported.

Dos disparadores, ambos idempotentes:
- initialize(): al arrancar, con el documento desired completo
- apply_desired(): en cada push posterior (puede llegar en cualquier momento)

Cada push es un REEMPLAZO COMPLETO de los campos reconocidos: un campo
ausente vuelve a su default, no conserva el valor anterior.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from ..actuation.client import DEFAULT_TIMEOUT_SECONDS, ActuationClient
from ..config_store import ConfigurationStore
from .fields import (
    RECOGNIZED_KEYS,
    InvalidFieldError,
    config_to_document,
    document_to_config,
    resolve_document,
)

logger = logging.getLogger(__name__)


class ConfigReporter(Protocol):
    """Canal de vuelta de la configuración efectiva (reported)."""

    def report(self, reported: Dict[str, Any]) -> None:
        """Publica el documento reported. Lanza si no se pudo enviar."""
        ...


class SyncStatus(str, Enum):
    APPLIED = "applied"
    NO_OP = "no_op"
    INVALID_DOCUMENT = "invalid_document"
    REPORT_FAILED = "report_failed"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncResult:
    """Resultado de una reconciliación."""
    status: SyncStatus
    effective: Dict[str, Any] = field(default_factory=dict)
    reported: bool = False
    error: str = ""

    @property
    def applied(self) -> bool:
        return self.status in (SyncStatus.APPLIED, SyncStatus.REPORT_FAILED)


ActuatorFactory = Callable[[str], ActuationClient]


class ConfigurationSynchronizer:
    """Reconcilia configuración desired contra el store local.
    
    Nunca lanza: cualquier error queda registrado y se refleja en SyncResult.
    No reintenta echos fallidos.
    """

    def __init__(
        self,
        store: ConfigurationStore,
        reporter: Optional[ConfigReporter] = None,
        actuator_factory: Optional[ActuatorFactory] = None,
        actuation_timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._store = store
        self._reporter = reporter
        self._actuator_factory = actuator_factory or (
            lambda endpoint: ActuationClient(endpoint, timeout=actuation_timeout)
        )
        self._sync_lock = threading.Lock()
        self._push_applied = False

    def set_reporter(self, reporter: Optional[ConfigReporter]):
        self._reporter = reporter

    def current_actuator(self) -> Optional[ActuationClient]:
        """Cliente de actuación ligado al endpoint vigente."""
        return self._store.actuator

    def initialize(self, desired: Optional[Mapping[str, Any]]) -> SyncResult:
        """Arranque: adopta el documento completo (o defaults) y construye el actuador.
        
        Si ya se aplicó un push, el documento de arranque es más viejo y se ignora.
        """
        logger.info("[SYNC] Initializing from desired configuration")
        result = self._reconcile(desired or {}, startup=True)

        # Documento rechazado: el actuador queda ligado a la configuración vigente
        with self._sync_lock:
            state = self._store.state()
            if state.actuator is None:
                self._store.replace(state.config, self._build_actuator(state.config.thresholds.actuation_endpoint))
        return result

    def apply_desired(self, desired: Optional[Mapping[str, Any]]) -> SyncResult:
        """Push posterior de configuración desired."""
        return self._reconcile(desired or {}, startup=False)

    def _reconcile(self, desired: Mapping[str, Any], startup: bool) -> SyncResult:
        with self._sync_lock:
            try:
                return self._reconcile_locked(desired, startup)
            except Exception as e:
                logger.exception("[SYNC] Unexpected reconciliation error: %s", e)
                return SyncResult(
                    status=SyncStatus.FAILED,
                    effective=config_to_document(self._store.snapshot()),
                    error=str(e),
                )

    def _reconcile_locked(self, desired: Mapping[str, Any], startup: bool) -> SyncResult:
        if startup and self._push_applied:
            logger.info("[SYNC] Desired push already applied - startup document skipped")
            return SyncResult(
                status=SyncStatus.NO_OP,
                effective=config_to_document(self._store.snapshot()),
            )

        if not isinstance(desired, Mapping):
            logger.warning("[SYNC] Desired configuration is not an object: %r", desired)
            return SyncResult(
                status=SyncStatus.INVALID_DOCUMENT,
                effective=config_to_document(self._store.snapshot()),
                error="desired configuration must be an object",
            )

        # Metadatos ($version, etc.) y claves desconocidas no cuentan
        recognized = [key for key in desired if key in RECOGNIZED_KEYS]
        if not recognized and not startup:
            logger.debug("[SYNC] Push without recognized fields - ignored")
            return SyncResult(
                status=SyncStatus.NO_OP,
                effective=config_to_document(self._store.snapshot()),
            )

        logger.info("[SYNC] Desired property change: %s", {k: desired[k] for k in recognized})

        try:
            resolved = resolve_document(desired)
        except InvalidFieldError as e:
            logger.warning("[SYNC] Rejected desired configuration: %s", e)
            return SyncResult(
                status=SyncStatus.INVALID_DOCUMENT,
                effective=config_to_document(self._store.snapshot()),
                error=str(e),
            )

        config = document_to_config(resolved)

        # El actuador se resuelve antes del swap: configuración y actuador cambian juntos
        current = self._store.state()
        endpoint = config.thresholds.actuation_endpoint
        actuator = current.actuator
        if startup or actuator is None or current.config.thresholds.actuation_endpoint != endpoint:
            actuator = self._build_actuator(endpoint)

        self._store.replace(config, actuator)
        if not startup:
            self._push_applied = True
        logger.info("[SYNC] Configuration adopted: %s", resolved)

        if not recognized or self._reporter is None:
            return SyncResult(status=SyncStatus.APPLIED, effective=resolved)

        try:
            self._reporter.report(dict(resolved))
        except Exception as e:
            logger.error("[SYNC] Failed to send reported configuration: %s", e)
            return SyncResult(
                status=SyncStatus.REPORT_FAILED,
                effective=resolved,
                error=str(e),
            )

        return SyncResult(status=SyncStatus.APPLIED, effective=resolved, reported=True)

    def _build_actuator(self, endpoint: str) -> Optional[ActuationClient]:
        logger.info("[SYNC] Actuation client bound to %s", endpoint or "<none>")
        return self._actuator_factory(endpoint) if endpoint else None
