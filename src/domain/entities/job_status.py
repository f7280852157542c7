"""Progress record of a monitoring job, read by external observers (e.g. UI pollers)."""

import threading
from datetime import datetime, timezone
from typing import Any


class JobStatus:
    """Mutable progress sink with a single writer (the job) and any number of readers.

    Writers call `update`, `fail` and `complete_successfully`; readers should use
    `to_dict` to get a consistent snapshot.
    """

    def __init__(self, message: str = "Waiting to begin job...", percent_complete: float = 0.0):
        self._lock = threading.Lock()
        self.message = message
        self.percent_complete = percent_complete
        self.error = False
        self.completed = False
        self.exception_details: str | None = None
        self.notes: list[str] = []
        self.updated_at = datetime.now(timezone.utc)

    def update(self, message: str, percent_complete: float | None = None) -> None:
        with self._lock:
            self.message = message
            if percent_complete is not None:
                self.percent_complete = max(0.0, min(100.0, float(percent_complete)))
            self.updated_at = datetime.now(timezone.utc)

    def fail(self, message: str, exception_details: str | None = None) -> None:
        with self._lock:
            self.message = message
            self.error = True
            self.completed = True
            self.percent_complete = 100.0
            self.exception_details = exception_details
            self.updated_at = datetime.now(timezone.utc)

    def complete_successfully(self, message: str) -> None:
        with self._lock:
            self.message = message
            self.error = False
            self.completed = True
            self.percent_complete = 100.0
            self.updated_at = datetime.now(timezone.utc)

    def add_note(self, note: str) -> None:
        """Record a note without touching the status message."""
        with self._lock:
            self.notes.append(note)
            self.updated_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "message": self.message,
                "percent_complete": self.percent_complete,
                "error": self.error,
                "completed": self.completed,
                "exception_details": self.exception_details,
                "notes": list(self.notes),
                "updated_at": self.updated_at.isoformat(),
            }
