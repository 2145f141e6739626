"""Rule-name classification — category and urgency tier.

Category is decided by case-insensitive substring checks evaluated in a fixed
order; the first match wins, so a rule containing both "login" and "threat"
is an access notable. Anything unmatched is also an access notable.

Urgency comes from a separate table of known rule names and defaults to
medium. An urgency set explicitly on the entry always wins.
"""

from notables.models import Category, LogEntry, Urgency

CATEGORY_RULES = (
    (("login", "access"), Category.ACCESS),
    (("network", "traffic"), Category.NETWORK),
    (("threat", "malware"), Category.THREAT),
    (("behavior", "uba"), Category.UBA),
)

DEFAULT_CATEGORY = Category.ACCESS
DEFAULT_URGENCY = Urgency.MEDIUM

KNOWN_RULE_URGENCY = {
    "suspicious login attempt": Urgency.CRITICAL,
    "data exfiltration detected": Urgency.HIGH,
    "unusual network traffic": Urgency.MEDIUM,
    "privilege escalation": Urgency.CRITICAL,
    "malware detection": Urgency.HIGH,
    "anomalous user behavior": Urgency.MEDIUM,
    "brute force attack": Urgency.CRITICAL,
    "data breach attempt": Urgency.HIGH,
}


def category_of(rule_name: str) -> Category:
    """Classify a rule name into one of the four notable categories."""
    lowered = (rule_name or "").lower()
    for needles, category in CATEGORY_RULES:
        if any(n in lowered for n in needles):
            return category
    return DEFAULT_CATEGORY


class Categorizer:
    """Category and urgency lookups with an extendable urgency table.

    ``urgency_rules`` maps rule names to tier names ("critical", "high", ...)
    and is layered over the built-in table; names compare case-insensitively.
    """

    def __init__(self, urgency_rules: dict | None = None):
        self._urgency = dict(KNOWN_RULE_URGENCY)
        for rule, tier in (urgency_rules or {}).items():
            if isinstance(tier, int):
                self._urgency[rule.strip().lower()] = Urgency(tier)
            else:
                self._urgency[rule.strip().lower()] = Urgency.from_label(str(tier))

    def category_of(self, rule_name: str) -> Category:
        return category_of(rule_name)

    def urgency_of(self, rule_name: str) -> Urgency:
        return self._urgency.get((rule_name or "").strip().lower(), DEFAULT_URGENCY)

    def effective_urgency(self, entry: LogEntry) -> Urgency:
        """The entry's own urgency when set, otherwise the rule's tier."""
        if entry.urgency is not None:
            return Urgency(entry.urgency)
        return self.urgency_of(entry.rule_name)
