"""Log entry storage — in-memory and SQLite backends behind one protocol.

Result ordering differs per backend and is part of each backend's contract:
``MemoryLogStore.filter`` keeps insertion order, ``SQLiteLogStore.filter``
returns newest first. ``all()`` is insertion order for both.
"""

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from notables.errors import StorageUnavailable
from notables.models import LogEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class LogStore(Protocol):
    name: str

    def append(self, entry: LogEntry) -> None: ...

    def all(self) -> list[LogEntry]: ...

    def filter(
        self,
        source_ip: str | None = None,
        rule: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
        exact_rule: bool = False,
    ) -> list[LogEntry]: ...

    def count(self) -> int: ...

    def close(self) -> None: ...


class ReadWriteLock:
    """Shared-read / exclusive-write lock that prefers waiting writers.

    Readers run together; once a writer is waiting, new readers queue behind
    it so a steady stream of reads cannot starve appends.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def matches(entry: LogEntry, source_ip=None, rule=None, start=None, end=None,
            exact_rule=False) -> bool:
    """True if the entry passes every active filter (case-insensitive text)."""
    if source_ip and source_ip.lower() not in entry.source_ip.lower():
        return False
    if rule:
        if exact_rule:
            if entry.rule_name.lower() != rule.lower():
                return False
        elif rule.lower() not in entry.rule_name.lower():
            return False
    if start is not None and entry.timestamp < start:
        return False
    if end is not None and entry.timestamp > end:
        return False
    return True


class MemoryLogStore:
    """Process-local list of entries; snapshots are list copies."""

    name = "memory"

    def __init__(self):
        self._logs: list[LogEntry] = []
        self._lock = ReadWriteLock()

    def append(self, entry: LogEntry) -> None:
        with self._lock.write():
            self._logs.append(entry)

    def all(self) -> list[LogEntry]:
        with self._lock.read():
            return list(self._logs)

    def filter(self, source_ip=None, rule=None, start=None, end=None,
               limit=None, exact_rule=False) -> list[LogEntry]:
        """Matching entries in insertion order, at most ``limit`` of them."""
        results = []
        with self._lock.read():
            for entry in self._logs:
                if not matches(entry, source_ip, rule, start, end, exact_rule):
                    continue
                results.append(entry)
                if limit is not None and len(results) >= limit:
                    break
        return results

    def count(self) -> int:
        with self._lock.read():
            return len(self._logs)

    def close(self) -> None:
        pass


_SCHEMA = """
CREATE TABLE IF NOT EXISTS logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    level TEXT NOT NULL,
    rule TEXT NOT NULL,
    source_ip TEXT NOT NULL,
    destination_ip TEXT,
    message TEXT NOT NULL,
    urgency INTEGER,
    metadata TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp);
CREATE INDEX IF NOT EXISTS idx_logs_rule ON logs(rule);
CREATE INDEX IF NOT EXISTS idx_logs_source_ip ON logs(source_ip);
"""

_COLUMNS = "timestamp, level, rule, source_ip, destination_ip, message, urgency, metadata"


def _format_ts(ts: datetime) -> str:
    # Fixed-width UTC text so string comparison orders chronologically.
    # strftime("%Y") does not pad years below 1000.
    ts = ts.astimezone(timezone.utc)
    return f"{ts.year:04d}-{ts:%m-%dT%H:%M:%S.%f}Z"


def _parse_ts(text: str) -> datetime:
    return datetime.fromisoformat(text.rstrip("Z")).replace(tzinfo=timezone.utc)


def _row_to_entry(row: sqlite3.Row) -> LogEntry:
    return LogEntry(
        timestamp=_parse_ts(row["timestamp"]),
        level=row["level"],
        rule_name=row["rule"],
        source_ip=row["source_ip"],
        destination_ip=row["destination_ip"],
        message=row["message"],
        urgency=row["urgency"],
        metadata=json.loads(row["metadata"]),
    )


class SQLiteLogStore:
    """Entries persisted to an SQLite file, one connection per operation."""

    name = "sqlite"

    def __init__(self, path: str, timeout: float = 5.0):
        self._path = path
        self._timeout = timeout
        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"cannot create {directory}: {exc}") from exc

        with self._transaction() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(_SCHEMA)
        logger.info("SQLite log store ready at %s", path)

    @contextmanager
    def _transaction(self):
        conn = None
        try:
            conn = sqlite3.connect(self._path, timeout=self._timeout)
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("SQLite store %s failed: %s", self._path, exc)
            raise StorageUnavailable(f"sqlite store unavailable: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()

    def append(self, entry: LogEntry) -> None:
        with self._transaction() as conn:
            conn.execute(
                f"INSERT INTO logs ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    _format_ts(entry.timestamp),
                    entry.level,
                    entry.rule_name,
                    entry.source_ip,
                    entry.destination_ip,
                    entry.message,
                    entry.urgency,
                    json.dumps(entry.metadata),
                ),
            )

    def all(self) -> list[LogEntry]:
        with self._transaction() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM logs ORDER BY id").fetchall()
        return [_row_to_entry(r) for r in rows]

    def filter(self, source_ip=None, rule=None, start=None, end=None,
               limit=None, exact_rule=False) -> list[LogEntry]:
        """Matching entries newest first, at most ``limit`` of them."""
        clauses = []
        args = []
        if source_ip:
            clauses.append("instr(lower(source_ip), lower(?)) > 0")
            args.append(source_ip)
        if rule:
            if exact_rule:
                clauses.append("lower(rule) = lower(?)")
            else:
                clauses.append("instr(lower(rule), lower(?)) > 0")
            args.append(rule)
        if start is not None:
            clauses.append("timestamp >= ?")
            args.append(_format_ts(start))
        if end is not None:
            clauses.append("timestamp <= ?")
            args.append(_format_ts(end))

        query = f"SELECT {_COLUMNS} FROM logs"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY timestamp DESC, id DESC"
        if limit is not None:
            query += " LIMIT ?"
            args.append(limit)

        with self._transaction() as conn:
            rows = conn.execute(query, args).fetchall()
        return [_row_to_entry(r) for r in rows]

    def count(self) -> int:
        with self._transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM logs").fetchone()[0]

    def close(self) -> None:
        pass


def create_store(config) -> LogStore:
    """Build the backend named by ``storage.backend`` in the config."""
    storage = config["storage"]
    backend = storage.get("backend", "memory")
    if backend == "memory":
        logger.info("Using in-memory log store")
        return MemoryLogStore()
    if backend == "sqlite":
        return SQLiteLogStore(storage.get("sqlite_path", "./data/logs.db"))
    raise ValueError(f"Unknown storage backend: {backend!r}")
