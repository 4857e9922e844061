"""Cumulative database-operation counters.

Benchmarks that talk to a database record their reads and writes on an
:class:`OperationCounter`.  The counters only ever grow for the lifetime
of the process; the iteration runner derives per-iteration costs by
subtracting a "before" reading from an "after" reading.

For ``sqlite3`` connections, :func:`instrument_sqlite` installs a trace
callback that classifies every executed statement automatically.
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass

from microbench.logging import get_logger

log = get_logger("counters")

_WRITE_KEYWORDS = frozenset({"INSERT", "UPDATE", "DELETE", "REPLACE"})
_READ_KEYWORDS = frozenset({"SELECT", "VALUES"})
_LEADING_COMMENT_RE = re.compile(r"^\s*(?:--[^\n]*\n|/\*.*?\*/)*\s*", re.DOTALL)
_FIRST_WORD_RE = re.compile(r"[A-Za-z]+")


# ---------------------------------------------------------------------------
# OperationCounter
# ---------------------------------------------------------------------------


@dataclass
class OperationCounter:
    """Monotonic read/write counters shared by a process."""

    reads: int = 0
    writes: int = 0

    def record_read(self, n: int = 1) -> None:
        """Add *n* read operations."""
        if n < 0:
            raise ValueError(f"Operation counts only grow (got read increment {n}).")
        self.reads += n

    def record_write(self, n: int = 1) -> None:
        """Add *n* write operations."""
        if n < 0:
            raise ValueError(f"Operation counts only grow (got write increment {n}).")
        self.writes += n


_DEFAULT_COUNTER = OperationCounter()


def default_counter() -> OperationCounter:
    """Return the process-wide counter used by ``SystemMetricsProvider()``."""
    return _DEFAULT_COUNTER


# ---------------------------------------------------------------------------
# Statement classification
# ---------------------------------------------------------------------------


def classify_statement(sql: str) -> str | None:
    """Classify a SQL statement as ``"read"``, ``"write"`` or None.

    Leading comments are skipped.  ``WITH`` queries count as writes when
    a write keyword appears anywhere in them, so
    ``WITH x AS (...) DELETE ...`` counts as a write.  Statements that
    are neither (``BEGIN``, ``CREATE``, ``PRAGMA``...) return None.
    """
    body = _LEADING_COMMENT_RE.sub("", sql, count=1)
    match = _FIRST_WORD_RE.match(body)
    if match is None:
        return None
    keyword = match.group(0).upper()

    if keyword == "WITH":
        words = {w.upper() for w in _FIRST_WORD_RE.findall(body)}
        if words & _WRITE_KEYWORDS:
            return "write"
        return "read"
    if keyword in _WRITE_KEYWORDS:
        return "write"
    if keyword in _READ_KEYWORDS:
        return "read"
    return None


def instrument_sqlite(
    connection: sqlite3.Connection,
    counter: OperationCounter | None = None,
) -> OperationCounter:
    """Count the statements executed on a sqlite3 connection.

    Replaces any trace callback already installed on *connection*.

    Args:
        connection: An open ``sqlite3.Connection``.
        counter: Counter to record into (default: the process-wide one).

    Returns:
        The counter receiving the operations.
    """
    target = counter if counter is not None else default_counter()

    def _trace(statement: str) -> None:
        kind = classify_statement(statement)
        if kind == "read":
            target.record_read()
        elif kind == "write":
            target.record_write()

    connection.set_trace_callback(_trace)
    log.debug("Instrumented sqlite3 connection %r", connection)
    return target
