"""
Query traces.

A trace is a JSON Lines file with one event per render, query and ambiguity
error, so a failing test run can be reviewed afterwards. Only selector
descriptions and match counts are written, never elements, and nothing in
the package reads a trace back.
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class TraceEvent:
    """One line of a query trace: a render, a query or an ambiguity error."""

    v: int  # format version, bumped when `data` payloads change shape
    type: str  # "query", "render" or "error"
    ts: str  # UTC, millisecond precision, "Z" suffix
    run_id: str  # groups the events of one test or script run
    seq: int  # 1-based position within the run
    data: dict[str, Any]
    ts_ms: int | None = None  # epoch milliseconds, omitted when unknown

    def to_dict(self) -> dict[str, Any]:
        """Plain dict in trace-file key order; `ts_ms` only when set."""
        result = {
            "v": self.v,
            "type": self.type,
            "ts": self.ts,
            "run_id": self.run_id,
            "seq": self.seq,
            "data": self.data,
        }
        if self.ts_ms is not None:
            result["ts_ms"] = self.ts_ms
        return result


class TraceSink(ABC):
    """Destination for trace events (a file, a list in a test, ...)."""

    @abstractmethod
    def emit(self, event: dict[str, Any]) -> None:
        """
        Record one event.

        Args:
            event: Output of `TraceEvent.to_dict()`; already JSON-serialisable
        """

    @abstractmethod
    def close(self) -> None:
        """Release the destination. Must be safe to call twice."""


class JsonlTraceSink(TraceSink):
    """
    Appends events to a JSON Lines file.

    Several runs may share one file; tell them apart by `run_id`. Lines are
    flushed as they are written, so a test that crashes mid-run still leaves
    every query it made in the file.
    """

    def __init__(self, path: str | Path):
        """
        Args:
            path: Trace file; missing parent directories are created
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "a", encoding="utf-8", buffering=1)

    def emit(self, event: dict[str, Any]) -> None:
        self._file.write(json.dumps(event, ensure_ascii=False) + "\n")

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


@dataclass
class Tracer:
    """
    Stamps events with run id, sequence number and time, then hands them to a sink.

    Pass one to `find`/`find_all` or to a `Renderer`; the counters let a test
    assert on how many queries ran without re-reading the trace file.

    Example:
        with Tracer(run_id="test_login", sink=JsonlTraceSink("traces/login.jsonl")) as tracer:
            find(container, "role=button text~'Sign in'", tracer=tracer)
    """

    run_id: str
    sink: TraceSink
    seq: int = field(default=0, init=False)
    total_events: int = field(default=0, init=False)
    total_queries: int = field(default=0, init=False)
    total_errors: int = field(default=0, init=False)

    def emit(self, event_type: str, data: dict[str, Any]) -> None:
        """
        Write an event of any type.

        Args:
            event_type: "query", "render", "error" or a caller-defined type
            data: Payload stored under the event's `data` key
        """
        self.seq += 1
        self.total_events += 1

        ts_ms = int(time.time() * 1000)
        ts = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(ts_ms / 1000))
        ts = f"{ts}.{ts_ms % 1000:03d}Z"

        event = TraceEvent(
            v=1,
            type=event_type,
            ts=ts,
            ts_ms=ts_ms,
            run_id=self.run_id,
            seq=self.seq,
            data=data,
        )
        self.sink.emit(event.to_dict())

    def emit_query(self, operation: str, selector: str, count: int) -> None:
        """
        Record that a query ran.

        Args:
            operation: "find" or "find_all"
            selector: `Matcher.describe()` of the evaluated matcher
            count: How many elements matched (the elements are not written)
        """
        self.total_queries += 1
        self.emit("query", {"operation": operation, "selector": selector, "count": count})

    def emit_render(self, container_ref: int, url: str | None = None) -> None:
        """Record a container mounted by the render bridge."""
        data: dict[str, Any] = {"container_ref": container_ref}
        if url is not None:
            data["url"] = url
        self.emit("render", data)

    def emit_error(self, error: str, **context: Any) -> None:
        """
        Record a failed query (e.g. an ambiguous `find`).

        Args:
            error: Exception message
            **context: Extra keys merged into the payload, such as `selector`
        """
        self.total_errors += 1
        self.emit("error", {"error": error, **context})

    def close(self) -> None:
        self.sink.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
