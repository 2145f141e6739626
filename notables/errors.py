"""Error kinds raised by the store, the aggregator and the ingestion boundary."""


class NotablesError(Exception):
    """Base class for all errors raised by this package."""


class InvalidLogEntry(NotablesError):
    """An ingestion payload was rejected before reaching the store."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid log entry")


class InvalidQueryParameter(NotablesError, ValueError):
    """A search or aggregation parameter could not be interpreted."""


class StorageUnavailable(NotablesError):
    """The storage backend failed; callers decide whether to retry."""
