"""Sincronización de configuración desired/reported."""

from .fields import CONFIG_FIELDS, RECOGNIZED_KEYS, InvalidFieldError, config_to_document
from .synchronizer import ConfigReporter, ConfigurationSynchronizer, SyncResult, SyncStatus

__all__ = [
    "CONFIG_FIELDS",
    "RECOGNIZED_KEYS",
    "InvalidFieldError",
    "config_to_document",
    "ConfigReporter",
    "ConfigurationSynchronizer",
    "SyncResult",
    "SyncStatus",
]
