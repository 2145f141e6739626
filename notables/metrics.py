"""Prometheus text exposition of ingestion counters."""

import time
from collections import Counter

from notables.store import LogStore

CONTENT_TYPE = "text/plain; version=0.0.4"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class Metrics:
    """Derives counters from one store snapshot per scrape."""

    def __init__(self, store: LogStore, time_func=None):
        self._store = store
        self._time_func = time_func or time.monotonic
        self._start_time = self._time_func()

    def uptime_seconds(self) -> int:
        return int(self._time_func() - self._start_time)

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all metrics."""
        entries = self._store.all()
        levels = Counter()
        rules = Counter()
        for entry in entries:
            levels[entry.level] += 1
            rules[entry.rule_name] += 1

        return {
            "total": len(entries),
            "by_level": dict(levels),
            "by_rule": dict(rules),
            "uptime_seconds": self.uptime_seconds(),
        }

    def render(self) -> str:
        snap = self.snapshot()
        lines = [
            "# HELP logger_logs_total Total number of logs ingested",
            "# TYPE logger_logs_total counter",
            f"logger_logs_total {snap['total']}",
            "# HELP logger_logs_by_level Number of logs by level",
            "# TYPE logger_logs_by_level counter",
        ]
        for level, count in sorted(snap["by_level"].items()):
            lines.append(f'logger_logs_by_level{{level="{_escape(level)}"}} {count}')

        lines.append("# HELP logger_logs_by_rule Number of logs by rule name")
        lines.append("# TYPE logger_logs_by_rule counter")
        for rule, count in sorted(snap["by_rule"].items()):
            lines.append(f'logger_logs_by_rule{{rule="{_escape(rule)}"}} {count}')

        lines.append("# HELP logger_uptime_seconds Uptime in seconds")
        lines.append("# TYPE logger_uptime_seconds gauge")
        lines.append(f"logger_uptime_seconds {snap['uptime_seconds']}")
        return "\n".join(lines) + "\n"
