"""
Thread-safe per-processor counters.

A pipeline is shared by every caller that processes records through it, so
counter updates are serialized with a lock. Counters are the only mutable
state a constructed pipeline carries.
"""

from __future__ import annotations

from threading import Lock

from .types import ProcessorMetrics


class ProcessorCounters:
    """Mutable counters behind a ProcessorMetrics snapshot."""

    def __init__(self, processor_id: str, processor_type: str) -> None:
        self._processor_id = processor_id
        self._processor_type = processor_type
        self._lock = Lock()
        self._received = 0
        self._sent = 0
        self._errors = 0
        self._ignored = 0

    def record_received(self) -> None:
        with self._lock:
            self._received += 1

    def record_sent(self) -> None:
        with self._lock:
            self._sent += 1

    def record_error(self) -> None:
        with self._lock:
            self._errors += 1

    def record_ignored(self) -> None:
        # An ignored failure still lets the record through.
        with self._lock:
            self._ignored += 1
            self._sent += 1

    def snapshot(self) -> ProcessorMetrics:
        with self._lock:
            return ProcessorMetrics(
                processor_id=self._processor_id,
                processor_type=self._processor_type,
                received=self._received,
                sent=self._sent,
                errors=self._errors,
                ignored=self._ignored,
            )
