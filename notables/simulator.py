import random
from datetime import datetime, timezone, timedelta

RULES = [
    "Suspicious Login Attempt",
    "Brute Force Attack",
    "Privilege Escalation",
    "Unusual Network Traffic",
    "Network Port Scan",
    "Malware Detection",
    "Threat Intel Match",
    "Anomalous User Behavior",
    "Data Exfiltration Detected",
    "Data Breach Attempt",
]
RULE_WEIGHTS = [0.18, 0.12, 0.05, 0.14, 0.08, 0.10, 0.06, 0.09, 0.10, 0.08]

LEVELS = ["INFO", "WARNING", "ERROR", "CRITICAL"]
LEVEL_WEIGHTS = [0.50, 0.30, 0.15, 0.05]

SOURCE_IPS = [f"192.168.1.{i}" for i in range(100, 110)] + [f"10.0.0.{i}" for i in range(50, 55)]
DESTINATION_IPS = ["10.10.0.5", "10.10.0.6", "172.16.0.1"]
USERS = [f"user-{i}" for i in range(1, 21)]


def generate_log(rule=None, source_ip=None, hours_ago=0, rng=None):
    """Generate a single random notable-event payload."""
    rng = rng or random
    if rule is None:
        rule = rng.choices(RULES, weights=RULE_WEIGHTS, k=1)[0]
    if source_ip is None:
        source_ip = rng.choice(SOURCE_IPS)

    ts = datetime.now(timezone.utc)
    if hours_ago:
        ts = ts - timedelta(hours=rng.uniform(0, hours_ago))

    log = {
        "timestamp": ts.isoformat(),
        "level": rng.choices(LEVELS, weights=LEVEL_WEIGHTS, k=1)[0],
        "ruleName": rule,
        "sourceIP": source_ip,
        "destinationIP": rng.choice(DESTINATION_IPS),
        "message": f"{rule} from {source_ip}",
    }

    # 40% chance of user metadata
    if rng.random() < 0.4:
        log["metadata"] = {
            "user": rng.choice(USERS),
            "request_id": f"req-{rng.randint(1000, 9999)}",
        }

    return log


def generate_batch(count=10, **kwargs):
    """Generate multiple notable-event payloads."""
    return [generate_log(**kwargs) for _ in range(count)]
