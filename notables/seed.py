"""Built-in notable events shown while the store is still empty."""

from datetime import datetime, timedelta

from notables.models import LogEntry, Urgency

# (rule name, urgency, source ip, age)
SEED_EVENTS = (
    ("Suspicious Login Attempt", Urgency.CRITICAL, "192.168.1.100", timedelta(hours=2)),
    ("Data Exfiltration Detected", Urgency.HIGH, "10.0.0.50", timedelta(hours=1)),
    ("Unusual Network Traffic", Urgency.MEDIUM, "172.16.0.25", timedelta(minutes=30)),
    ("Privilege Escalation", Urgency.CRITICAL, "192.168.1.101", timedelta(minutes=15)),
    ("Malware Detection", Urgency.HIGH, "10.0.0.51", timedelta(minutes=10)),
    ("Anomalous User Behavior", Urgency.MEDIUM, "172.16.0.26", timedelta(minutes=5)),
    ("Brute Force Attack", Urgency.CRITICAL, "192.168.1.102", timedelta(minutes=2)),
    ("Data Breach Attempt", Urgency.HIGH, "10.0.0.52", timedelta(minutes=1)),
)


def seed_entries(now: datetime) -> list[LogEntry]:
    """One entry per seed event, aged relative to ``now``."""
    return [
        LogEntry(
            timestamp=now - age,
            level="INFO",
            rule_name=rule,
            source_ip=source_ip,
            urgency=int(urgency),
        )
        for rule, urgency, source_ip, age in SEED_EVENTS
    ]
