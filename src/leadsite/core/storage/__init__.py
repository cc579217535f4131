"""In-process storage used by the API."""

from .log_buffer import LogBuffer, LogEntry

__all__ = ["LogBuffer", "LogEntry"]
