"""Dashboard projections computed from a store snapshot.

Every call rescans one fresh ``store.all()`` snapshot; nothing is cached and
no lock is held while folding. When the store is empty the built-in seed
events stand in for the whole snapshot, so every projection sees either all
real entries or only seed entries.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone

from notables.categorizer import Categorizer
from notables.errors import InvalidQueryParameter
from notables.models import (
    Category,
    LogEntry,
    StatTile,
    SummaryStats,
    Timeline,
    TimelineSeries,
    TopEvent,
    TopSource,
    Urgency,
    UrgencyHistogram,
)
from notables.seed import seed_entries
from notables.sparkline import SyntheticSeriesGenerator
from notables.store import LogStore

logger = logging.getLogger(__name__)

TIMELINE_HOURS = 24

SERIES_COLORS = {
    Category.ACCESS: ("Access", "#3B82F6"),
    Category.NETWORK: ("Network", "#10B981"),
    Category.THREAT: ("Threat", "#EF4444"),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Aggregator:
    def __init__(
        self,
        store: LogStore,
        categorizer: Categorizer | None = None,
        series: SyntheticSeriesGenerator | None = None,
        clock=None,
        top_n: int = 10,
        window_hours: int = 24,
        align_to_hour: bool = True,
        fallback_enabled: bool = True,
    ):
        self._store = store
        self._categorizer = categorizer or Categorizer()
        self._series = series or SyntheticSeriesGenerator()
        self._clock = clock or utc_now
        self._top_n = top_n
        self._window = timedelta(hours=window_hours)
        self._align_to_hour = align_to_hour
        self._fallback_enabled = fallback_enabled

    @classmethod
    def from_config(cls, store, config, categorizer=None, series=None, clock=None):
        aggregation = config["aggregation"]
        return cls(
            store,
            categorizer=categorizer,
            series=series,
            clock=clock,
            top_n=aggregation["top_n"],
            window_hours=aggregation["window_hours"],
            align_to_hour=config["timeline"]["align_to_hour"],
            fallback_enabled=aggregation["fallback_enabled"],
        )

    def _snapshot(self, now: datetime) -> list[LogEntry]:
        entries = self._store.all()
        if entries or not self._fallback_enabled:
            return entries
        logger.debug("Log store is empty, serving seed events")
        return seed_entries(now)

    def _in_window(self, entries, now):
        start = now - self._window
        return [e for e in entries if start <= e.timestamp <= now]

    def _hour_label(self, ts: datetime) -> str:
        ts = ts.astimezone(timezone.utc)
        if self._align_to_hour:
            return ts.strftime("%H:00")
        return ts.strftime("%H:%M")

    def _cap(self, limit):
        if limit is None:
            return self._top_n
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise InvalidQueryParameter(f"limit must be a positive integer, got {limit!r}")
        return limit

    # --- Projections -----------------------------------------------------

    def summary(self) -> SummaryStats:
        """Count every entry into its category; deltas are always 0."""
        counts = Counter(
            self._categorizer.category_of(e.rule_name)
            for e in self._snapshot(self._clock())
        )
        return SummaryStats(
            access=StatTile(total=counts[Category.ACCESS]),
            network=StatTile(total=counts[Category.NETWORK]),
            threat=StatTile(total=counts[Category.THREAT]),
            uba=StatTile(total=counts[Category.UBA]),
        )

    def urgency_histogram(self) -> UrgencyHistogram:
        """Urgency tiers of the entries inside the trailing window."""
        now = self._clock()
        counts = Counter(
            self._categorizer.effective_urgency(e)
            for e in self._in_window(self._snapshot(now), now)
        )
        return UrgencyHistogram(
            critical=counts[Urgency.CRITICAL],
            high=counts[Urgency.HIGH],
            medium=counts[Urgency.MEDIUM],
            low=counts[Urgency.LOW],
        )

    def timeline(self) -> Timeline:
        """24 hourly buckets, oldest first, split into access/network/threat.

        An entry lands in the bucket whose label equals its own formatted
        hour. An entry from the oldest partial hour shares its label with
        the current hour and is counted there.
        """
        now = self._clock()
        labels = [
            self._hour_label(now - timedelta(hours=i))
            for i in range(TIMELINE_HOURS - 1, -1, -1)
        ]
        position = {label: i for i, label in enumerate(labels)}
        data = {category: [0] * TIMELINE_HOURS for category in SERIES_COLORS}

        for entry in self._in_window(self._snapshot(now), now):
            i = position.get(self._hour_label(entry.timestamp))
            category = self._categorizer.category_of(entry.rule_name)
            if i is None or category not in data:
                continue
            data[category][i] += 1

        series = [
            TimelineSeries(name=name, data=data[category], color=color)
            for category, (name, color) in SERIES_COLORS.items()
        ]
        return Timeline(labels=labels, series=series)

    def top_events(self, limit=None) -> list[TopEvent]:
        """Most frequent rules; urgency taken from each rule's first entry."""
        cap = self._cap(limit)
        counts = {}
        urgency = {}
        for entry in self._snapshot(self._clock()):
            if entry.rule_name not in counts:
                counts[entry.rule_name] = 0
                urgency[entry.rule_name] = self._categorizer.effective_urgency(entry).label
            counts[entry.rule_name] += 1

        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)[:cap]
        return [
            TopEvent(
                rule_name=rule,
                count=count,
                urgency=urgency[rule],
                sparkline=self._series.generate(count),
            )
            for rule, count in ranked
        ]

    def top_sources(self, limit=None) -> list[TopSource]:
        """Most frequent source IPs; category taken from each IP's first entry."""
        cap = self._cap(limit)
        counts = {}
        category = {}
        for entry in self._snapshot(self._clock()):
            if entry.source_ip not in counts:
                counts[entry.source_ip] = 0
                category[entry.source_ip] = self._categorizer.category_of(entry.rule_name).value
            counts[entry.source_ip] += 1

        ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)[:cap]
        return [
            TopSource(
                source_ip=ip,
                count=count,
                category=category[ip],
                sparkline=self._series.generate(count),
            )
            for ip, count in ranked
        ]

    def activity(self) -> dict:
        """Per-minute (last hour), per-hour (last 24h) and per-level counts.

        Real entries only; the seed fallback does not apply here.
        """
        now = self._clock()
        per_minute = Counter()
        per_hour = Counter()
        levels = Counter()
        hour_ago = now - timedelta(hours=1)
        day_ago = now - timedelta(hours=24)

        for entry in self._store.all():
            ts = entry.timestamp.astimezone(timezone.utc)
            if ts > hour_ago:
                per_minute[ts.strftime("%H:%M")] += 1
            if ts > day_ago:
                per_hour[f"{ts:%b} {ts.day} {ts:%H}:00"] += 1
            levels[entry.level] += 1

        return {
            "perMinute": dict(per_minute),
            "perHour": dict(per_hour),
            "levelCounts": dict(levels),
        }
