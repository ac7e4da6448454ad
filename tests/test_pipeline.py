"""Tests del pipeline de decisión (clasificar → decidir → forward → actuar)."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from edge_module.core.actuation.client import ActuationClient
from edge_module.core.actuation.results import ActuationFailure, ActuationResult
from edge_module.core.config_store import ConfigurationStore
from edge_module.core.domain.module_config import ClassifierParams, ModuleConfig, ThresholdConfig
from edge_module.core.domain.reading import Reading
from edge_module.core.domain.severity import ActuationCommand, Severity
from edge_module.core.pipeline.processor import ReadingPipeline
from edge_module.core.sync.synchronizer import ConfigurationSynchronizer

# Desviaciones enormes: el clasificador no marca ninguna lectura
QUIET_CLASSIFIER = ClassifierParams(temp_mean=25.0, temp_stddev=1000.0, hum_mean=60.0, hum_stddev=1000.0)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def publisher():
    """Mock del colector remoto."""
    publisher = MagicMock()
    publisher.publish = MagicMock(return_value=True)
    return publisher


@pytest.fixture
def actuator():
    actuator = MagicMock()
    actuator.notify = MagicMock(return_value=ActuationResult.ok())
    return actuator


@pytest.fixture
def store(actuator) -> ConfigurationStore:
    return ConfigurationStore(
        ModuleConfig(thresholds=ThresholdConfig(), classifier=QUIET_CLASSIFIER),
        actuator=actuator,
    )


@pytest.fixture
def pipeline(store, publisher) -> ReadingPipeline:
    return ReadingPipeline(store, publisher)


def reading(temperature: float, humidity: float) -> Reading:
    return Reading(temperature=temperature, humidity=humidity, observed_at=datetime(2026, 1, 31, 8, 0, tzinfo=timezone.utc))


# =============================================================================
# TEST 1: DECISIONES
# =============================================================================

class TestDecisions:

    def test_example_stream(self, pipeline, publisher, actuator):
        results = [pipeline.process(reading(t, h)) for t, h in [(30, 50), (42, 50), (20, 95), (25, 60)]]

        assert [str(r.decision) for r in results] == [
            "drop",
            "forward(CRITICAL,temp-high)",
            "forward(CRITICAL,hum-high)",
            "drop",
        ]
        assert publisher.publish.call_count == 2
        assert actuator.notify.call_count == 2
        assert pipeline.stats.forwarded == 2
        assert pipeline.stats.dropped == 2

    def test_drop_has_no_effects(self, pipeline, publisher, actuator):
        result = pipeline.process(reading(25, 60))

        assert result.decision.forward is False
        assert result.forwarded is False
        assert result.actuation is None
        publisher.publish.assert_not_called()
        actuator.notify.assert_not_called()

    def test_forwarded_reading_is_unchanged(self, pipeline, publisher):
        pipeline.process(reading(42, 50))

        scored = publisher.publish.call_args[0][0]
        assert scored.temperature == 42
        assert scored.humidity == 50
        assert scored.is_anomaly is False
        assert scored.to_message() == {
            "temperature": 42,
            "humidity": 50,
            "timeCreated": "2026-01-31T08:00:00+00:00",
            "isAnomaly": False,
        }

    def test_command_built_from_original_reading(self, pipeline, actuator):
        pipeline.process(reading(42, 50))

        actuator.notify.assert_called_once_with(
            ActuationCommand(temperature=42, humidity=50, severity=Severity.CRITICAL)
        )

    def test_anomaly_only_is_warning(self, store, publisher, actuator):
        store.replace(ModuleConfig(classifier=ClassifierParams(temp_mean=20.0, temp_stddev=1.0)))
        pipeline = ReadingPipeline(store, publisher)

        result = pipeline.process(reading(25, 60))

        assert result.scored.is_anomaly is True
        assert result.decision.severity is Severity.WARNING
        assert actuator.notify.call_args[0][0].severity is Severity.WARNING

    def test_uses_latest_configuration(self, store, pipeline, publisher):
        store.replace(ModuleConfig(thresholds=ThresholdConfig(temp_upper=28.0), classifier=QUIET_CLASSIFIER))

        result = pipeline.process(reading(30, 50))

        assert result.decision.forward is True
        assert result.decision.severity is Severity.CRITICAL


# =============================================================================
# TEST 2: INDEPENDENCIA FORWARD / ACTUACIÓN
# =============================================================================

class TestEffectIndependence:

    def test_actuation_500_does_not_undo_forward(self, store, publisher):
        """Un 500 del actuador no afecta al forward ya realizado ni lanza."""
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        store.replace(store.snapshot(), ActuationClient("http://actuator/", transport=transport))
        pipeline = ReadingPipeline(store, publisher)

        result = pipeline.process(reading(42, 50))

        assert result.forwarded is True
        publisher.publish.assert_called_once()
        assert result.actuation.success is False
        assert result.actuation.failure is ActuationFailure.UNEXPECTED_STATUS
        assert pipeline.stats.actuations_failed == 1

    def test_forward_failure_still_actuates(self, pipeline, publisher, actuator):
        publisher.publish.side_effect = ConnectionError("broker down")

        result = pipeline.process(reading(42, 50))

        assert result.forwarded is False
        actuator.notify.assert_called_once()
        assert result.actuation.success is True

    def test_actuator_exception_is_contained(self, pipeline, actuator):
        actuator.notify.side_effect = RuntimeError("boom")

        result = pipeline.process(reading(42, 50))

        assert result.forwarded is True
        assert result.actuation.failure is ActuationFailure.TRANSPORT

    def test_no_actuator_bound(self, store, publisher):
        store.replace(store.snapshot(), None)
        pipeline = ReadingPipeline(store, publisher)

        result = pipeline.process(reading(42, 50))

        assert result.forwarded is True
        assert result.actuation is None

    def test_empty_endpoint_skips_actuation(self, store, publisher, actuator):
        store.replace(ModuleConfig(thresholds=ThresholdConfig(actuation_endpoint=""), classifier=QUIET_CLASSIFIER))
        pipeline = ReadingPipeline(store, publisher)

        result = pipeline.process(reading(42, 50))

        assert result.forwarded is True
        actuator.notify.assert_not_called()


# =============================================================================
# TEST 3: CONFIGURACIÓN Y ACTUADOR CAMBIAN JUNTOS
# =============================================================================

class TestEndpointSwap:

    def test_reading_during_endpoint_change_uses_matching_client(self, publisher):
        """Una lectura a mitad de la reconciliación nunca mezcla endpoint y actuador."""
        posted = []
        transport = httpx.MockTransport(lambda request: posted.append(str(request.url)) or httpx.Response(200))
        store = ConfigurationStore()
        pipeline = ReadingPipeline(store, publisher)
        observed = []

        def factory(endpoint):
            if endpoint == "http://new/":
                # El swap aún no ocurrió: config y actuador siguen siendo los viejos
                observed.append(store.snapshot().thresholds.actuation_endpoint)
                pipeline.process(reading(42, 50))
            return ActuationClient(endpoint, transport=transport)

        sync = ConfigurationSynchronizer(store, actuator_factory=factory)
        sync.initialize({"tempUpper": 30, "actuationEndpoint": "http://old/"})

        result = sync.apply_desired({"tempUpper": 30, "actuationEndpoint": "http://new/"})
        observed.append(store.snapshot().thresholds.actuation_endpoint)
        pipeline.process(reading(42, 50))

        assert result.applied is True
        assert observed == ["http://old/", "http://new/"]
        assert posted == observed
        assert store.state().actuator.endpoint == "http://new/"

    def test_state_pairs_config_with_its_client(self, store, actuator):
        replacement = MagicMock()
        store.replace(ModuleConfig(thresholds=ThresholdConfig(actuation_endpoint="http://b/")), replacement)

        state = store.state()

        assert state.config.thresholds.actuation_endpoint == "http://b/"
        assert state.actuator is replacement
