"""Tests del store de configuración."""

import threading

from edge_module.core.config_store import ConfigurationStore
from edge_module.core.domain.module_config import ModuleConfig, ThresholdConfig


class TestConfigurationStore:

    def test_starts_with_defaults(self):
        store = ConfigurationStore()
        assert store.snapshot() == ModuleConfig()

    def test_replace_returns_previous(self):
        store = ConfigurationStore()
        first = store.snapshot()
        new = ModuleConfig(thresholds=ThresholdConfig(temp_upper=40.0))

        previous = store.replace(new)

        assert previous is first
        assert store.snapshot() is new
        assert store.thresholds.temp_upper == 40.0

    def test_snapshot_is_immutable(self):
        store = ConfigurationStore()
        snap = store.snapshot()
        try:
            snap.thresholds.temp_upper = 99.0
        except AttributeError:
            pass
        assert store.thresholds.temp_upper == 35.0

    def test_readers_never_see_partial_updates(self):
        """Con escrituras concurrentes, upper y lower siempre vienen del mismo snapshot."""
        store = ConfigurationStore()
        configs = [
            ModuleConfig(thresholds=ThresholdConfig(temp_upper=float(i + 100), temp_lower=float(i)))
            for i in range(50)
        ]
        stop = threading.Event()
        torn = []

        def writer():
            while not stop.is_set():
                for cfg in configs:
                    store.replace(cfg)

        def reader():
            for _ in range(5000):
                t = store.thresholds
                if t.temp_upper - t.temp_lower not in (100.0, 25.0):
                    torn.append(t)

        w = threading.Thread(target=writer)
        w.start()
        readers = [threading.Thread(target=reader) for _ in range(4)]
        for r in readers:
            r.start()
        for r in readers:
            r.join()
        stop.set()
        w.join()

        assert torn == []

    def test_replace_without_actuator_keeps_current(self):
        actuator = object()
        store = ConfigurationStore(actuator=actuator)

        store.replace(ModuleConfig(thresholds=ThresholdConfig(temp_upper=40.0)))

        assert store.actuator is actuator
        assert store.state().config.thresholds.temp_upper == 40.0
