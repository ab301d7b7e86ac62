"""
Module: inventory_kernel.db.executor
Responsibility: Execute one parameterized statement against the pooled
    engine and hand back plain rows / affected counts / generated ids.  This
    is the only code in the kernel that touches a connection.
Architecture position: Kernel > DB.  May import from db/engine.py and
    logging_config.  Consumed by the statement builder, repositories,
    the audit recorder and the history selector.

Invariants enforced:
    - Each call checks a connection out of the pool, runs the statement in
      its own transaction (commit on success, rollback on failure) and
      returns the connection.  Nothing is cached between calls, so one
      executor may be shared by any number of threads.
    - Values are always bound, never interpolated.  Positional ``?``
      placeholders are rewritten to SQLAlchemy named binds (``:p0``, ...);
      literal colons in the text are escaped so they are not read as binds.

Failure modes:
    - Store/driver errors (sqlalchemy.exc.DBAPIError and subclasses)
      propagate unchanged after a ``statement_failed`` log line.  No retry.
"""

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import TextClause

from inventory_kernel.db.engine import get_engine
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.executor")

Params = Sequence[Any] | Mapping[str, Any]

_QUOTES = frozenset("'\"`")


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one executed statement."""

    rows: tuple[dict[str, Any], ...]
    rowcount: int
    lastrowid: int | None = None


def _comment_end(sql: str, i: int) -> int | None:
    """Index just past the comment starting at ``sql[i]``, or None."""
    if sql.startswith("--", i):
        end = sql.find("\n", i)
        return len(sql) if end == -1 else end
    if sql.startswith("/*", i):
        end = sql.find("*/", i + 2)
        return len(sql) if end == -1 else end + 2
    return None


def bind_statement(sql: str, params: Params = ()) -> TextClause:
    """
    Build a bound ``text()`` clause from caller-supplied SQL.

    A mapping binds ``:name`` placeholders verbatim.  A sequence binds
    positional ``?`` placeholders in order; ``?`` inside quoted literals,
    ``--`` line comments and ``/* */`` block comments is left alone.
    """
    if isinstance(params, Mapping):
        return text(sql).bindparams(
            *(bindparam(name, value) for name, value in params.items())
        )

    parts: list[str] = []
    position = 0
    quote: str | None = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote is None:
            end = _comment_end(sql, i)
            if end is not None:
                parts.append(sql[i:end].replace(":", "\\:"))
                i = end
                continue
        if ch == ":":
            parts.append("\\:")
        elif quote is not None:
            if ch == quote:
                quote = None
            parts.append(ch)
        elif ch in _QUOTES:
            quote = ch
            parts.append(ch)
        elif ch == "?":
            parts.append(f":p{position}")
            position += 1
        else:
            parts.append(ch)
        i += 1

    clause = text("".join(parts))
    if params:
        clause = clause.bindparams(
            *(bindparam(f"p{i}", value) for i, value in enumerate(params))
        )
    return clause


class StatementExecutor:
    """
    Runs parameterized statements against the connection pool.

    Contract:
        Stateless apart from the engine reference.  Every call is an
        independent unit of work.

    Guarantees:
        - ``execute`` returns rows as plain dicts for row-returning statements
          and the affected-row count for DML.
        - ``insert`` returns the generated primary key.

    Non-goals:
        - No retries, no timeouts beyond the pool's own, no SQL validation.
        - No multi-statement transactions: the business write and its audit
          write are two separate calls by design.
    """

    def __init__(self, engine: Engine | None = None):
        """
        Args:
            engine: Engine to use.  Defaults to the module-level engine from
                ``init_engine_from_url()``, resolved lazily on each call.
        """
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine if self._engine is not None else get_engine()

    def execute(self, sql: str, params: Params = ()) -> ExecutionResult:
        """
        Execute one statement and return its rows / counts.

        Raises:
            sqlalchemy.exc.DBAPIError: Any store error, unchanged.
        """
        clause = bind_statement(sql, params)
        started = time.monotonic()
        try:
            with self.engine.begin() as conn:
                result = conn.execute(clause)
                if result.returns_rows:
                    rows = tuple(dict(row._mapping) for row in result)
                    lastrowid = None
                else:
                    rows = ()
                    lastrowid = result.lastrowid
                rowcount = result.rowcount
        except Exception:
            logger.error(
                "statement_failed",
                extra={"sql": sql, "param_count": len(params)},
                exc_info=True,
            )
            raise

        logger.debug(
            "statement_executed",
            extra={
                "sql": sql,
                "param_count": len(params),
                "rowcount": rowcount,
                "duration_ms": round((time.monotonic() - started) * 1000, 3),
            },
        )
        return ExecutionResult(rows=rows, rowcount=rowcount, lastrowid=lastrowid)

    def insert(self, sql: str, params: Params = ()) -> int | None:
        """Execute an INSERT and return the generated ``id`` (cursor lastrowid)."""
        return self.execute(sql, params).lastrowid
