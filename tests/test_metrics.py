"""Tests for the metrics module."""

from datetime import datetime, timezone

from notables.metrics import Metrics
from notables.models import LogEntry
from notables.store import MemoryLogStore


def _entry(level="INFO", rule="Malware Detection"):
    return LogEntry(timestamp=datetime(2025, 5, 15, tzinfo=timezone.utc), level=level, rule_name=rule)


class FakeTime:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestMetrics:
    def test_snapshot(self):
        store = MemoryLogStore()
        store.append(_entry("INFO"))
        store.append(_entry("ERROR", rule="Brute Force Attack"))
        store.append(_entry("INFO"))

        snap = Metrics(store).snapshot()
        assert snap["total"] == 3
        assert snap["by_level"] == {"INFO": 2, "ERROR": 1}
        assert snap["by_rule"] == {"Malware Detection": 2, "Brute Force Attack": 1}

    def test_empty_store(self):
        snap = Metrics(MemoryLogStore()).snapshot()
        assert snap["total"] == 0
        assert snap["by_level"] == {}

    def test_uptime(self):
        fake = FakeTime()
        metrics = Metrics(MemoryLogStore(), time_func=fake)
        fake.now += 42.7
        assert metrics.uptime_seconds() == 42

    def test_render_exposition(self):
        store = MemoryLogStore()
        store.append(_entry("WARNING", rule='Rule "quoted"'))
        text = Metrics(store).render()
        assert "# TYPE logger_logs_total counter" in text
        assert "logger_logs_total 1\n" in text
        assert 'logger_logs_by_level{level="WARNING"} 1' in text
        assert 'logger_logs_by_rule{rule="Rule \\"quoted\\""} 1' in text
        assert "# TYPE logger_uptime_seconds gauge" in text
        assert text.endswith("\n")

    def test_reads_store_once_per_scrape(self):
        class CountingStore(MemoryLogStore):
            calls = 0

            def all(self):
                CountingStore.calls += 1
                return super().all()

        store = CountingStore()
        store.append(_entry())
        Metrics(store).render()
        assert CountingStore.calls == 1
