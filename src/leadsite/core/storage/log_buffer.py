"""Bounded in-memory buffer of recent log records.

The buffer is installed as a loguru sink, so everything the application logs is
mirrored here and can be read back through the debug endpoints. Route handlers
run on a thread pool, so all access goes through a lock.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LogLevel = Literal["debug", "info", "warn", "error"]

# Context keys bound by the request middleware; everything else in ``extra`` is data.
_CONTEXT_KEYS = {"request_id", "endpoint", "method"}

_LEVEL_NAMES: dict[str, LogLevel] = {
    "TRACE": "debug",
    "DEBUG": "debug",
    "INFO": "info",
    "SUCCESS": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "error",
}


class LogEntry(BaseModel):
    """A single buffered log record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime
    level: LogLevel
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    endpoint: str | None = None
    method: str | None = None
    request_id: str | None = None


class LogBuffer:
    """Newest-first ring buffer of :class:`LogEntry` objects."""

    def __init__(self, max_logs: int = 100) -> None:
        if max_logs < 1:
            raise ValueError("max_logs must be at least 1")
        self._entries: deque[LogEntry] = deque(maxlen=max_logs)
        self._lock = threading.Lock()

    @property
    def max_logs(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.appendleft(entry)

    def entries(self, limit: int | None = None) -> list[LogEntry]:
        """Return a snapshot of the buffered entries, newest first."""
        with self._lock:
            snapshot = list(self._entries)
        return snapshot if limit is None else snapshot[:limit]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def sink(self, message: Any) -> None:
        """Loguru sink: convert the record behind ``message`` into a :class:`LogEntry`."""
        record = message.record
        extra = record["extra"]

        request_id = extra.get("request_id")
        data = {
            key: _jsonable(value)
            for key, value in extra.items()
            if key not in _CONTEXT_KEYS
        }
        if record["exception"] is not None and record["exception"].value is not None:
            data.setdefault("error", str(record["exception"].value))

        self.append(
            LogEntry(
                timestamp=record["time"].astimezone(UTC),
                level=_LEVEL_NAMES.get(record["level"].name, "info"),
                message=record["message"],
                data=data,
                endpoint=extra.get("endpoint"),
                method=extra.get("method"),
                request_id=None if request_id in (None, "-") else request_id,
            )
        )


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
