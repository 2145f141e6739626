from datetime import datetime, timezone

import pytest

from notables.categorizer import Categorizer, category_of
from notables.models import Category, LogEntry, Urgency


def _entry(rule, urgency=None):
    return LogEntry(
        timestamp=datetime(2025, 5, 15, tzinfo=timezone.utc),
        level="INFO",
        rule_name=rule,
        urgency=urgency,
    )


class TestCategoryOf:
    @pytest.mark.parametrize("rule, expected", [
        ("Suspicious Login Attempt", Category.ACCESS),
        ("Unauthorized ACCESS to share", Category.ACCESS),
        ("Unusual Network Traffic", Category.NETWORK),
        ("DNS traffic spike", Category.NETWORK),
        ("Threat Intel Match", Category.THREAT),
        ("Malware Detection", Category.THREAT),
        ("Anomalous User Behavior", Category.UBA),
        ("UBA risk score exceeded", Category.UBA),
    ])
    def test_substring_rules(self, rule, expected):
        assert category_of(rule) == expected

    def test_unknown_rule_falls_back_to_access(self):
        assert category_of("Privilege Escalation") == Category.ACCESS
        assert category_of("") == Category.ACCESS

    def test_first_matching_rule_wins(self):
        assert category_of("Login from malware host") == Category.ACCESS
        assert category_of("Threat behavior on network") == Category.NETWORK
        assert category_of("Malware behavior") == Category.THREAT

    def test_case_insensitive(self):
        assert category_of("MALWARE") == category_of("malware") == Category.THREAT


class TestUrgency:
    def test_known_rules(self):
        c = Categorizer()
        assert c.urgency_of("Suspicious Login Attempt") == Urgency.CRITICAL
        assert c.urgency_of("malware detection") == Urgency.HIGH
        assert c.urgency_of("Anomalous User Behavior") == Urgency.MEDIUM

    def test_unknown_rule_defaults_to_medium(self):
        assert Categorizer().urgency_of("Something New") == Urgency.MEDIUM

    def test_urgency_is_stable(self):
        c = Categorizer()
        results = {c.urgency_of("Brute Force Attack") for _ in range(50)}
        assert results == {Urgency.CRITICAL}

    def test_configured_rules_extend_table(self):
        c = Categorizer({"Ransomware Beacon": "critical", "Port Probe": 1, "Odd Thing": "bogus"})
        assert c.urgency_of("ransomware beacon") == Urgency.CRITICAL
        assert c.urgency_of("Port Probe") == Urgency.LOW
        assert c.urgency_of("Odd Thing") == Urgency.MEDIUM
        # Built-in entries survive
        assert c.urgency_of("Data Breach Attempt") == Urgency.HIGH

    def test_explicit_urgency_wins(self):
        c = Categorizer()
        assert c.effective_urgency(_entry("Suspicious Login Attempt", urgency=1)) == Urgency.LOW
        assert c.effective_urgency(_entry("Suspicious Login Attempt")) == Urgency.CRITICAL
        assert c.effective_urgency(_entry("Unknown Rule")) == Urgency.MEDIUM

    def test_tier_labels(self):
        assert Urgency.CRITICAL.label == "critical"
        assert Urgency.from_label("High") == Urgency.HIGH
        assert Urgency.from_label("nope") == Urgency.MEDIUM
