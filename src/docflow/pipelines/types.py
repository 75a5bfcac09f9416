"""
Core data types and protocols for the pipeline engine.

Records are plain JSON-compatible dictionaries. Processors are any objects
that expose a ``name`` and an ``apply`` method; the built-in variants share a
common base class, but the engine only relies on this protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from typing_extensions import Protocol, runtime_checkable

from .exceptions import ProcessingError

# Type alias for records flowing through pipeline processors
Record = Dict[str, Any]


@runtime_checkable
class Processor(Protocol):
    """Base protocol for all record processors."""

    @property
    def name(self) -> str:
        """Return the processor type name used for logging and ids."""

    def apply(self, record: Record) -> Record:
        """
        Transform ``record`` and return it.

        Implementations may mutate ``record`` in place; the pipeline hands
        every processor a private working copy. Failures are reported by
        raising ProcessingError.
        """


@dataclass(frozen=True)
class ProcessorMetrics:
    """
    Point-in-time counters for one processor in a pipeline.

    Attributes:
        processor_id: Full processor id (e.g. "logs.processors[0].lowercase")
        processor_type: Registered type name
        received: Records handed to the processor
        sent: Records that left the processor successfully (includes
            recovered and ignored failures)
        errors: Failures that were neither recovered nor ignored
        ignored: Failures suppressed by ignore_failure
    """

    processor_id: str
    processor_type: str
    received: int = 0
    sent: int = 0
    errors: int = 0
    ignored: int = 0


@dataclass
class PipelineMetrics:
    """
    Metrics collected for a single pipeline run.

    Attributes:
        executed_processors: Ids of processors that were invoked, in order
        duration_ms: Total run duration in milliseconds
    """

    executed_processors: List[str] = field(default_factory=list)
    duration_ms: float = 0.0


@dataclass
class PipelineResult:
    """
    Result of running one record through a pipeline without raising.

    Attributes:
        pipeline_id: Id of the pipeline that ran
        success: Whether the record came out of the chain
        record: Transformed record (None on failure)
        error: The failure that aborted the run (None on success)
        metrics: Per-run metrics
    """

    pipeline_id: str
    success: bool
    record: Optional[Record] = None
    error: Optional[ProcessingError] = None
    metrics: PipelineMetrics = field(default_factory=PipelineMetrics)

    def as_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation (useful for logging/tests)."""
        return {
            "pipeline_id": self.pipeline_id,
            "success": self.success,
            "record": self.record,
            "error": str(self.error) if self.error else None,
            "executed_processors": list(self.metrics.executed_processors),
            "duration_ms": self.metrics.duration_ms,
        }
