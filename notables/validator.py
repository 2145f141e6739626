import json
import logging
import os
import threading
from collections import defaultdict

import jsonschema

from notables.errors import InvalidLogEntry
from notables.models import LogEntry, create_log_entry, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "log_schema.json")


class LogValidator:
    """Validates ingestion payloads against a JSON schema and parses them."""

    def __init__(self, schema_path=None):
        with open(schema_path or DEFAULT_SCHEMA_PATH, "r") as f:
            schema = json.load(f)

        self._validator = jsonschema.Draft202012Validator(schema)
        self._lock = threading.Lock()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats():
        return {
            "total": 0,
            "valid": 0,
            "invalid": 0,
            "error_types": defaultdict(int),
        }

    def validate(self, payload):
        """Validate a payload against the schema and the timestamp format.

        Returns:
            tuple: (is_valid: bool, errors: list[str])
        """
        errors = list(self._validator.iter_errors(payload))
        error_types = [e.validator for e in errors]
        messages = [e.message for e in errors]

        if not errors:
            raw_ts = payload.get("timestamp")
            if raw_ts:
                try:
                    parse_timestamp(raw_ts)
                except ValueError:
                    error_types.append("timestamp")
                    messages.append(f"{raw_ts!r} is not an ISO 8601 timestamp")

        with self._lock:
            self._stats["total"] += 1
            if not messages:
                self._stats["valid"] += 1
            else:
                self._stats["invalid"] += 1
                for kind in error_types:
                    self._stats["error_types"][kind] += 1

        return not messages, messages

    def parse(self, payload, now=None) -> LogEntry:
        """Validate and build a LogEntry; raises InvalidLogEntry on rejection."""
        is_valid, errors = self.validate(payload)
        if not is_valid:
            logger.warning("Rejected log entry: %s", "; ".join(errors))
            raise InvalidLogEntry(errors)
        return create_log_entry(payload, now=now)

    def get_stats(self):
        """Return a copy of the stats dict."""
        with self._lock:
            stats = dict(self._stats)
            stats["error_types"] = dict(stats["error_types"])
        return stats

    def reset_stats(self):
        """Reset all stat counters."""
        with self._lock:
            self._stats = self._empty_stats()
