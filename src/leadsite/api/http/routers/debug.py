"""Read and clear the in-process log buffer."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from loguru import logger

from src.leadsite.api.http.deps import get_log_buffer
from src.leadsite.core.storage.log_buffer import LogBuffer

router = APIRouter(prefix="/api/debug", tags=["debug"])


@router.get("")
def read_logs(
    limit: int | None = Query(default=None, ge=1),
    log_buffer: LogBuffer = Depends(get_log_buffer),
) -> dict[str, Any]:
    """Recent log entries, newest first."""
    entries = log_buffer.entries(limit)
    return {
        "logs": [entry.model_dump(by_alias=True, mode="json") for entry in entries],
        "totalLogs": len(log_buffer),
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.delete("")
def clear_logs(log_buffer: LogBuffer = Depends(get_log_buffer)) -> dict[str, Any]:
    log_buffer.clear()
    logger.info("Server logs cleared")
    return {
        "message": "Server logs cleared",
        "timestamp": datetime.now(UTC).isoformat(),
    }
