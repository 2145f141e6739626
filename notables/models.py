"""Log entry model and the projection types served to the dashboard."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum


class Category(Enum):
    ACCESS = "access"
    NETWORK = "network"
    THREAT = "threat"
    UBA = "uba"


class Urgency(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Urgency":
        """Map a tier name to its value; unknown names fall back to MEDIUM."""
        try:
            return cls[label.strip().upper()]
        except KeyError:
            return cls.MEDIUM


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime          # tz-aware, UTC
    level: str
    rule_name: str
    source_ip: str = ""
    destination_ip: str | None = None
    message: str = ""
    urgency: int | None = None   # explicit 1..4, None means derive from rule
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "ruleName": self.rule_name,
            "sourceIP": self.source_ip,
            "destinationIP": self.destination_ip,
            "message": self.message,
            "urgency": self.urgency,
            "metadata": dict(self.metadata),
        }


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values are taken as UTC.
    Raises ValueError when the string is not ISO 8601 or falls outside the
    representable UTC range.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range: {value!r}") from exc


def create_log_entry(payload: dict, now: datetime | None = None) -> LogEntry:
    """Build a LogEntry from an already-validated ingestion payload.

    Fills the ingestion defaults: current time, level INFO, empty metadata.
    ``event`` and ``description`` are accepted as aliases of ``ruleName``
    and ``message``.
    """
    raw_ts = payload.get("timestamp")
    if raw_ts:
        timestamp = parse_timestamp(raw_ts)
    else:
        timestamp = now or datetime.now(timezone.utc)

    urgency = payload.get("urgency")
    if urgency is not None:
        urgency = int(urgency)

    return LogEntry(
        timestamp=timestamp,
        level=payload.get("level") or "INFO",
        rule_name=payload.get("ruleName") or payload.get("event") or "",
        source_ip=payload.get("sourceIP") or "",
        destination_ip=payload.get("destinationIP"),
        message=payload.get("message") or payload.get("description") or "",
        urgency=urgency,
        metadata=dict(payload.get("metadata") or {}),
    )


# --- Projections ---------------------------------------------------------


@dataclass
class StatTile:
    total: int = 0
    delta: int = 0

    def to_dict(self) -> dict:
        return {"total": self.total, "delta": self.delta}


@dataclass
class SummaryStats:
    access: StatTile = field(default_factory=StatTile)
    network: StatTile = field(default_factory=StatTile)
    threat: StatTile = field(default_factory=StatTile)
    uba: StatTile = field(default_factory=StatTile)

    def to_dict(self) -> dict:
        return {
            "accessNotables": self.access.to_dict(),
            "networkNotables": self.network.to_dict(),
            "threatNotables": self.threat.to_dict(),
            "ubaNotables": self.uba.to_dict(),
        }


@dataclass
class UrgencyHistogram:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    def to_dict(self) -> dict:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }


@dataclass
class TimelineSeries:
    name: str
    data: list[int]
    color: str

    def to_dict(self) -> dict:
        return {"name": self.name, "data": list(self.data), "color": self.color}


@dataclass
class Timeline:
    labels: list[str]
    series: list[TimelineSeries]

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "series": [s.to_dict() for s in self.series],
        }


@dataclass
class TopEvent:
    rule_name: str
    count: int
    urgency: str
    sparkline: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ruleName": self.rule_name,
            "sparkline": list(self.sparkline),
            "count": self.count,
            "urgency": self.urgency,
        }


@dataclass
class TopSource:
    source_ip: str
    count: int
    category: str
    sparkline: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sourceIP": self.source_ip,
            "sparkline": list(self.sparkline),
            "count": self.count,
            "category": self.category,
        }
