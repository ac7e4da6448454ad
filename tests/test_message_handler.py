"""Tests del handler de mensajes y del validador de payloads.

Tests obligatorios:
1. Payload válido → lectura de dominio
2. Campos extra ignorados
3. Payload malformado → descartado sin excepción
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from edge_module.core.config_store import ConfigurationStore
from edge_module.core.pipeline.processor import ReadingPipeline
from edge_module.core.transport.message_handler import MessageHandler
from edge_module.core.validation.payload_validator import validate_reading


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def valid_payload() -> Dict[str, Any]:
    """Payload de lectura válido."""
    return {
        "temperature": 42.5,
        "humidity": 48.0,
        "timeCreated": "2026-01-31T08:00:00.123456Z",
    }


@pytest.fixture
def publisher():
    publisher = MagicMock()
    publisher.publish = MagicMock(return_value=True)
    return publisher


@pytest.fixture
def handler(publisher) -> MessageHandler:
    pipeline = ReadingPipeline(ConfigurationStore(), publisher)
    return MessageHandler(pipeline)


def encode(data) -> bytes:
    return json.dumps(data).encode("utf-8")


# =============================================================================
# TEST 1: VALIDACIÓN
# =============================================================================

class TestValidation:

    def test_valid_payload(self, valid_payload):
        result = validate_reading(valid_payload)

        assert result.valid is True
        reading = result.reading
        assert reading.temperature == 42.5
        assert reading.humidity == 48.0
        assert reading.observed_at == datetime(2026, 1, 31, 8, 0, 0, 123456, tzinfo=timezone.utc)

    def test_extra_fields_are_ignored(self, valid_payload):
        valid_payload["deviceId"] = "dht22-01"
        valid_payload["isAnomaly"] = True

        result = validate_reading(valid_payload)

        assert result.valid is True

    def test_snake_case_timestamp_accepted_with_warning(self, valid_payload):
        valid_payload["time_created"] = valid_payload.pop("timeCreated")

        result = validate_reading(valid_payload)

        assert result.valid is True
        assert "snake_case" in str(result.warnings)

    @pytest.mark.parametrize("missing", ["temperature", "humidity", "timeCreated"])
    def test_missing_field_is_invalid(self, valid_payload, missing):
        del valid_payload[missing]

        result = validate_reading(valid_payload)

        assert result.valid is False
        assert result.error

    def test_non_numeric_value_is_invalid(self, valid_payload):
        valid_payload["temperature"] = "hot"
        assert validate_reading(valid_payload).valid is False

    def test_non_object_is_invalid(self):
        result = validate_reading([1, 2, 3])
        assert result.valid is False
        assert "list" in result.error


# =============================================================================
# TEST 2: HANDLER
# =============================================================================

class TestMessageHandler:

    def test_valid_message_is_processed(self, handler, publisher, valid_payload):
        result = handler.handle("edge/input1", encode(valid_payload))

        assert result is not None
        assert result.decision.forward is True
        publisher.publish.assert_called_once()
        assert handler.stats.received == 1
        assert handler.stats.forwarded == 1

    def test_in_band_message_is_dropped(self, handler, publisher, valid_payload):
        valid_payload["temperature"] = 22.5
        valid_payload["humidity"] = 60.0

        result = handler.handle("edge/input1", encode(valid_payload))

        assert result.decision.forward is False
        publisher.publish.assert_not_called()
        assert handler.stats.dropped == 1

    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b"\xff\xfe",
            b"[]",
            encode({"temperature": 20.0}),
            encode({"humidity": 50.0, "timeCreated": "2026-01-31T08:00:00Z"}),
        ],
    )
    def test_malformed_message_is_dropped(self, handler, publisher, payload):
        """Mensaje malformado: se registra, se descarta, sin forward ni excepción."""
        result = handler.handle("edge/input1", payload)

        assert result is None
        publisher.publish.assert_not_called()
        assert handler.stats.failed == 1
        assert handler.stats.received == 1
