"""Event emitter writing typed NDJSON events for split runs."""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from pydantic import BaseModel, Field
from enum import Enum


class EventLevel(str, Enum):
    """Event levels for structured logging."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class EventStatus(str, Enum):
    """Canonical event statuses."""

    START = "START"
    OK = "OK"
    END = "END"
    FAIL = "FAIL"


class SplitEvent(BaseModel):
    """Typed schema for all split events."""

    ts: str = Field(..., description="ISO 8601 timestamp with Z suffix")
    rid: str = Field(..., description="Unique run identifier")
    stage: str = Field(..., description="Stage emitting the event")
    op: str = Field(..., description="Operation name")
    status: EventStatus = Field(..., description="Event status")
    level: EventLevel = Field(EventLevel.INFO, description="Event level")
    pid: int = Field(..., description="Process ID")
    duration_ms: Optional[int] = Field(None, description="Duration in milliseconds")

    # Context fields
    piece: Optional[int] = None
    num_pieces: Optional[int] = None
    bytes: Optional[int] = None
    reason: Optional[str] = None

    # Additional metadata
    metadata: Dict[str, Any] = Field(default_factory=dict)


def _status_for(op: str) -> EventStatus:
    if any(k in op for k in ["error", "fail"]):
        return EventStatus.FAIL
    if "start" in op:
        return EventStatus.START
    if "complete" in op:
        return EventStatus.END
    return EventStatus.OK


class EventEmitter:
    """
    Writes events to ``<log_dir>/<run_id>/events.ndjson``.

    Use as a context manager; the instance itself is the ``emit`` callback
    accepted by the split engine::

        with EventEmitter(run_id, log_dir="var/logs") as emitter:
            split_file(..., emit=emitter)
    """

    _FIELDS = {"piece", "num_pieces", "bytes", "reason", "duration_ms"}

    def __init__(self, run_id: str, log_dir: Optional[str | Path] = None):
        self.run_id = run_id
        self.pid = os.getpid()

        # Standard logging convention: var/logs/<run_id>/events.ndjson
        self.log_dir = Path(log_dir) if log_dir else Path("var/logs")
        self.run_log_dir = self.log_dir / run_id
        self.run_log_dir.mkdir(parents=True, exist_ok=True)
        self.events_path = self.run_log_dir / "events.ndjson"

        self._create_symlink()
        self._file: Optional[TextIO] = None

    def __enter__(self):
        self._file = open(self.events_path, "a", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file:
            self._file.close()
            self._file = None

    def _create_symlink(self):
        """Point ``<log_dir>/latest.ndjson`` at this run's events."""
        latest = self.log_dir / "latest.ndjson"
        if latest.exists() or latest.is_symlink():
            latest.unlink()
        try:
            latest.symlink_to(f"{self.run_id}/events.ndjson")
        except OSError:
            # Symlinks are a convenience; some filesystems refuse them
            pass

    def __call__(self, event_type: str, **kwargs) -> None:
        self.emit(event_type, **kwargs)

    def emit(self, event_type: str, **kwargs) -> None:
        """Write one event. ``event_type`` is ``<stage>.<op>``."""
        if not self._file:
            return

        stage, _, op = event_type.partition(".")
        if not op:
            stage, op = "split", stage

        level = EventLevel.ERROR if _status_for(op) == EventStatus.FAIL else EventLevel.INFO
        fields = {k: v for k, v in kwargs.items() if k in self._FIELDS}
        metadata = {k: v for k, v in kwargs.items() if k not in self._FIELDS and k != "run_id"}

        event = SplitEvent(
            ts=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            rid=self.run_id,
            stage=stage,
            op=op,
            status=_status_for(op),
            level=level,
            pid=self.pid,
            metadata=metadata,
            **fields,
        )

        self._file.write(event.model_dump_json(exclude_none=True) + "\n")
        self._file.flush()


def read_events(path: str | Path) -> list[Dict[str, Any]]:
    """Load all events from an NDJSON file."""
    events = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                events.append(json.loads(line))
    return events
