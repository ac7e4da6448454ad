"""Cliente HTTP hacia el actuador de la máquina.

Un único POST por escalado; éxito solo con HTTP 200. Sin reintentos,
sin backoff, sin circuit breaker. Ningún error se propaga al llamador.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx

from ..domain.severity import ActuationCommand
from .results import ActuationFailure, ActuationResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class ActuationClient:
    """Notifica comandos al actuador externo ligado a un endpoint.
    
    Expone dos formas:
    - notify(): bloqueante, con timeout acotado
    - notify_async(): corrutina cancelable (asyncio.wait_for / task.cancel())
    
    Los transports son inyectables para tests (httpx.MockTransport).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport
        self._async_transport = async_transport

    def notify(self, command: ActuationCommand) -> ActuationResult:
        """Envía el comando y espera la respuesta (bloqueante)."""
        body = self._serialize(command)
        if body is None:
            return ActuationResult.failed(ActuationFailure.SERIALIZATION, "command not serializable")

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    self.endpoint,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as e:
            return self._log_failure(ActuationFailure.TIMEOUT, str(e))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._log_failure(ActuationFailure.TRANSPORT, str(e))

        return self._check_response(command, response)

    async def notify_async(self, command: ActuationCommand) -> ActuationResult:
        """Versión asíncrona de notify().
        
        La cancelación de la tarea se propaga como asyncio.CancelledError.
        """
        body = self._serialize(command)
        if body is None:
            return ActuationResult.failed(ActuationFailure.SERIALIZATION, "command not serializable")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._async_transport) as client:
                response = await client.post(
                    self.endpoint,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as e:
            return self._log_failure(ActuationFailure.TIMEOUT, str(e))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._log_failure(ActuationFailure.TRANSPORT, str(e))

        return self._check_response(command, response)

    def _serialize(self, command: ActuationCommand) -> Optional[bytes]:
        try:
            # allow_nan=False: NaN/inf no es JSON válido para el actuador
            return json.dumps(command.to_payload(), allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error("[ACTUATION] Serialization failed: %s", e)
            return None

    def _check_response(self, command: ActuationCommand, response: httpx.Response) -> ActuationResult:
        if response.status_code == 200:
            logger.info(
                "[ACTUATION] Command %s delivered to %s",
                command.severity.name,
                self.endpoint,
            )
            return ActuationResult.ok(response.status_code)

        return self._log_failure(
            ActuationFailure.UNEXPECTED_STATUS,
            f"HTTP {response.status_code}",
            status_code=response.status_code,
        )

    def _log_failure(
        self,
        failure: ActuationFailure,
        detail: str,
        status_code: Optional[int] = None,
    ) -> ActuationResult:
        logger.warning("[ACTUATION] %s calling %s: %s", failure.value, self.endpoint, detail)
        return ActuationResult.failed(failure, detail, status_code=status_code)

    def __repr__(self) -> str:
        return f"ActuationClient(endpoint={self.endpoint!r}, timeout={self.timeout})"
