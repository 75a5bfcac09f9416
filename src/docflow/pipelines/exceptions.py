"""
Exception hierarchy for the docflow pipeline engine.

Load-time failures (malformed specs, unknown processor types, rejected
processor configs) derive from PipelineLoadError. Per-record failures derive
from ProcessingError. Caller errors at the process boundary (unparseable
records, unknown pipeline ids) derive directly from PipelineError.
"""

from typing import List, Optional


def _with_context(message: str, context_parts: List[str]) -> str:
    if context_parts:
        return f"{message} ({', '.join(context_parts)})"
    return message


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""

    pass


class PipelineLoadError(PipelineError):
    """
    Raised when a pipeline specification cannot be turned into a pipeline.

    Args:
        message: Error description
        pipeline_id: Id of the pipeline being loaded (optional)
        processor_index: Position of the offending processor definition (optional)
        processor_type: Type name of the offending processor (optional)
        processor_id: Full id of the offending processor (optional)
        cause: Underlying error, when this one wraps another (optional)
    """

    def __init__(
        self,
        message: str,
        pipeline_id: Optional[str] = None,
        processor_index: Optional[int] = None,
        processor_type: Optional[str] = None,
        processor_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.reason = message
        self.pipeline_id = pipeline_id
        self.processor_index = processor_index
        self.processor_type = processor_type
        self.processor_id = processor_id
        self.cause = cause

        context_parts = []
        if pipeline_id:
            context_parts.append(f"pipeline='{pipeline_id}'")
        if processor_id:
            context_parts.append(f"processor='{processor_id}'")
        if processor_index is not None:
            context_parts.append(f"index={processor_index}")
        if processor_type:
            context_parts.append(f"type='{processor_type}'")

        super().__init__(_with_context(message, context_parts))

    def located(
        self,
        pipeline_id: Optional[str],
        processor_index: int,
        processor_type: str,
        processor_id: str,
    ) -> "PipelineLoadError":
        """Return a copy of this error annotated with where in the pipeline specification it occurred."""
        return type(self)(
            self.reason,
            pipeline_id=pipeline_id,
            processor_index=processor_index,
            processor_type=processor_type,
            processor_id=processor_id,
            cause=self.cause or self,
        )


class MalformedSpecError(PipelineLoadError):
    """Raised when specification text does not parse or has the wrong shape."""


class UnknownProcessorTypeError(PipelineLoadError):
    """Raised when a processor definition names an unregistered type."""


class InvalidProcessorConfigError(PipelineLoadError):
    """Raised when a processor rejects its configuration at construction."""


class ProcessingError(PipelineError):
    """
    Raised when a processor cannot apply to a record.

    Args:
        message: Error description
        field: Field path involved in the failure (optional)
        processor_id: Id of the processor that failed (optional)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        processor_id: Optional[str] = None,
    ):
        self.reason = message
        self.field = field
        self.processor_id = processor_id

        context_parts = []
        if processor_id:
            context_parts.append(f"processor='{processor_id}'")
        if field:
            context_parts.append(f"field='{field}'")

        super().__init__(_with_context(message, context_parts))

    def for_processor(self, processor_id: str) -> "ProcessingError":
        """Return a copy of this error attributed to ``processor_id``.

        Errors that already name a processor are returned unchanged so the
        innermost attribution wins.
        """
        if self.processor_id:
            return self
        located = type(self)(self.reason, field=self.field, processor_id=processor_id)
        located.__cause__ = self.__cause__
        return located


class FieldNotFoundError(ProcessingError):
    """Raised when a required field is absent from the record."""

    def __init__(
        self,
        field: str,
        processor_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"key <{field}> is missing from record",
            field=field,
            processor_id=processor_id,
        )

    def for_processor(self, processor_id: str) -> "ProcessingError":
        if self.processor_id:
            return self
        located = FieldNotFoundError(
            self.field or "", processor_id=processor_id, message=self.reason
        )
        located.__cause__ = self.__cause__
        return located


class FieldTypeError(ProcessingError):
    """Raised when a field holds a value of the wrong type for the operation."""


class FieldConflictError(ProcessingError):
    """Raised when a write would clobber an existing field."""


class MalformedRecordError(PipelineError):
    """Raised when record text submitted for processing is not a JSON object."""


class PipelineNotFoundError(PipelineError):
    """
    Raised when no pipeline is loaded under the requested id.

    Args:
        pipeline_id: The id that was looked up (None when no id was given and
            nothing has been loaded yet)
    """

    def __init__(self, pipeline_id: Optional[str]):
        self.pipeline_id = pipeline_id
        if pipeline_id is None:
            super().__init__("No pipeline has been loaded")
        else:
            super().__init__(f"Pipeline '{pipeline_id}' is not loaded")
