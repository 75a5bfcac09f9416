"""
Core pipeline execution.

A Pipeline is an immutable, ordered chain of processors. ``execute`` runs a
record through the chain and either returns the transformed record or raises
the ProcessingError that stopped it. The caller's record is never modified:
the pipeline works on a deep copy and discards it on failure.

Failure handling, innermost first:
    1. A processor's own ``on_failure`` handlers run against the record. If
       they all succeed the failure is recovered.
    2. Otherwise, if the processor has ``ignore_failure`` set, the failure is
       dropped and the chain continues.
    3. Otherwise the chain stops. Pipeline-level ``on_failure`` handlers run;
       if they all succeed the record is returned, else their error is raised.
"""

from __future__ import annotations

import copy
import time
from typing import Iterator, List, Optional, Sequence, Tuple

from docflow.utils.logging import get_logger

from .exceptions import ProcessingError
from .metrics import ProcessorCounters
from .types import (
    PipelineMetrics,
    PipelineResult,
    Processor,
    ProcessorMetrics,
    Record,
)

logger = get_logger(__name__)


class PipelineProcessor:
    """
    A constructed processor together with its pipeline-level options.

    Args:
        processor_id: Unique id within the pipeline
        processor: The configured processor
        ignore_failure: Swallow failures that on_failure handlers do not recover
        on_failure: Handlers run when the processor fails
    """

    def __init__(
        self,
        processor_id: str,
        processor: Processor,
        ignore_failure: bool = False,
        on_failure: Sequence["PipelineProcessor"] = (),
    ) -> None:
        self._id = processor_id
        self._processor = processor
        self._ignore_failure = ignore_failure
        self._on_failure: Tuple[PipelineProcessor, ...] = tuple(on_failure)
        self._counters = ProcessorCounters(processor_id, processor.name)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._processor.name

    @property
    def processor(self) -> Processor:
        return self._processor

    @property
    def ignore_failure(self) -> bool:
        return self._ignore_failure

    @property
    def on_failure(self) -> Tuple["PipelineProcessor", ...]:
        return self._on_failure

    def process(self, record: Record, executed: Optional[List[str]] = None) -> Record:
        """
        Apply the processor with its failure policy.

        Raises:
            ProcessingError: If the failure is neither recovered nor ignored
        """
        self._counters.record_received()
        if executed is not None:
            executed.append(self._id)

        try:
            result = _apply(self._id, self._processor, record)
        except ProcessingError as error:
            return self._handle_failure(record, error, executed)

        self._counters.record_sent()
        return result

    def _handle_failure(
        self,
        record: Record,
        error: ProcessingError,
        executed: Optional[List[str]],
    ) -> Record:
        if self._on_failure:
            try:
                record = run_handlers(self._on_failure, record, executed)
            except ProcessingError as handler_error:
                error = handler_error
            else:
                self._counters.record_sent()
                return record

        if self._ignore_failure:
            self._counters.record_ignored()
            logger.debug(
                "pipeline.processor.failure_ignored",
                processor=self._id,
                error=str(error),
            )
            return record

        self._counters.record_error()
        logger.debug(
            "pipeline.processor.failed",
            processor=self._id,
            error=str(error),
        )
        raise error

    def walk(self) -> Iterator["PipelineProcessor"]:
        """Yield this processor and every nested handler, depth first."""
        yield self
        for handler in self._on_failure:
            yield from handler.walk()

    def metrics(self) -> ProcessorMetrics:
        return self._counters.snapshot()

    def __repr__(self) -> str:
        return f"PipelineProcessor(id={self._id!r}, processor={self._processor!r})"


def _apply(processor_id: str, processor: Processor, record: Record) -> Record:
    try:
        result = processor.apply(record)
    except ProcessingError as error:
        raise error.for_processor(processor_id) from error.__cause__
    except Exception as exc:
        raise ProcessingError(
            f"Processor execution failed: {exc}", processor_id=processor_id
        ) from exc

    if not isinstance(result, dict):
        raise ProcessingError(
            f"Processor returned {type(result).__name__}, expected an object",
            processor_id=processor_id,
        )
    return result


def run_handlers(
    handlers: Sequence[PipelineProcessor],
    record: Record,
    executed: Optional[List[str]] = None,
) -> Record:
    """Run processors in order, stopping at the first unrecovered failure."""
    for handler in handlers:
        record = handler.process(record, executed)
    return record


class Pipeline:
    """
    Immutable chain of processors identified by an id.

    Supports a raising ``execute`` for engine callers and a non-raising
    ``run`` that reports the outcome and timing as a PipelineResult.
    """

    def __init__(
        self,
        pipeline_id: str,
        processors: Sequence[PipelineProcessor] = (),
        on_failure: Sequence[PipelineProcessor] = (),
        description: Optional[str] = None,
    ) -> None:
        if not pipeline_id:
            raise ValueError("Pipeline must have a non-empty id")
        self._id = pipeline_id
        self._processors: Tuple[PipelineProcessor, ...] = tuple(processors)
        self._on_failure: Tuple[PipelineProcessor, ...] = tuple(on_failure)
        self._description = description

    @property
    def id(self) -> str:
        return self._id

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def processors(self) -> Tuple[PipelineProcessor, ...]:
        return self._processors

    @property
    def on_failure(self) -> Tuple[PipelineProcessor, ...]:
        return self._on_failure

    def __len__(self) -> int:
        return len(self._processors)

    def execute(self, record: Record) -> Record:
        """
        Transform a record.

        Args:
            record: Input record; it is copied and never modified

        Returns:
            The transformed record (a new object)

        Raises:
            ProcessingError: If a processor fails and nothing recovers it
        """
        return self._execute(record, None)

    def run(self, record: Record) -> PipelineResult:
        """Execute the pipeline and capture the outcome instead of raising."""
        executed: List[str] = []
        start = time.perf_counter()
        try:
            output = self._execute(record, executed)
        except ProcessingError as error:
            return PipelineResult(
                pipeline_id=self._id,
                success=False,
                error=error,
                metrics=PipelineMetrics(
                    executed_processors=executed,
                    duration_ms=_elapsed_ms(start),
                ),
            )

        return PipelineResult(
            pipeline_id=self._id,
            success=True,
            record=output,
            metrics=PipelineMetrics(
                executed_processors=executed,
                duration_ms=_elapsed_ms(start),
            ),
        )

    def metrics(self) -> List[ProcessorMetrics]:
        """Return counter snapshots for every processor and handler."""
        snapshots: List[ProcessorMetrics] = []
        for top_level in self._processors + self._on_failure:
            snapshots.extend(node.metrics() for node in top_level.walk())
        return snapshots

    # --------------------------------------------------------------------- #
    # Internal helpers
    # --------------------------------------------------------------------- #

    def _execute(self, record: Record, executed: Optional[List[str]]) -> Record:
        try:
            working = copy.deepcopy(record)
        except RecursionError as exc:
            raise ProcessingError("Record is nested too deeply to process") from exc
        try:
            return run_handlers(self._processors, working, executed)
        except ProcessingError as error:
            if not self._on_failure:
                raise
            logger.debug(
                "pipeline.on_failure.started",
                pipeline=self._id,
                processor=error.processor_id,
                error=str(error),
            )
            return run_handlers(self._on_failure, working, executed)

    def __repr__(self) -> str:
        return f"Pipeline(id={self._id!r}, processors={len(self._processors)})"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


__all__ = ["Pipeline", "PipelineProcessor", "run_handlers"]
