"""Resultado tipado de una llamada de actuación."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ActuationFailure(str, Enum):
    """Motivo de fallo de la actuación."""
    SERIALIZATION = "serialization"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    UNEXPECTED_STATUS = "unexpected_status"


@dataclass(frozen=True)
class ActuationResult:
    """Resultado de un intento (único) de actuación."""
    success: bool
    failure: Optional[ActuationFailure] = None
    status_code: Optional[int] = None
    detail: str = ""

    @classmethod
    def ok(cls, status_code: int = 200) -> "ActuationResult":
        return cls(success=True, status_code=status_code)

    @classmethod
    def failed(
        cls,
        failure: ActuationFailure,
        detail: str = "",
        status_code: Optional[int] = None,
    ) -> "ActuationResult":
        return cls(success=False, failure=failure, status_code=status_code, detail=detail)

    def __bool__(self) -> bool:
        return self.success
