"""
Record transformation pipelines for docflow.

This package builds ordered chains of field processors from declarative
JSON/YAML specifications, keeps them in a thread-safe store keyed by id, and
runs structured records through them.

Example Usage:
    >>> from docflow.pipelines import PipelineEngine
    >>>
    >>> engine = PipelineEngine()
    >>> engine.load('''
    ... {
    ...   "id": "logs-sample",
    ...   "processors": [
    ...     {"lowercase": {"field": "user_name"}},
    ...     {"rename": {"field": "msg", "target_field": "message",
    ...                 "ignore_missing": true}}
    ...   ]
    ... }
    ... ''')
    'logs-sample'
    >>> engine.process('{"user_name": "John Doe"}', "logs-sample")
    '{"user_name":"john doe"}'

Custom processors are registered by type name with any callable that
accepts the options mapping and returns an object with ``name`` and
``apply``:

    >>> engine.register_processor("tag", TagProcessor.from_options)

Available Components:
    - PipelineEngine: load specifications and process JSON records
    - build_pipeline / SpecLoader: specification to Pipeline assembly
    - Pipeline / PipelineProcessor: immutable processor chains
    - ProcessorRegistry: type name to constructor mapping
    - PipelineStore: id to Pipeline mapping
    - Pipeline exceptions: load-time and per-record error types
"""

from .builder import SpecLoader, build_default_loader, build_pipeline
from .codec import decode_record, encode_record
from .core import Pipeline, PipelineProcessor
from .engine import PipelineEngine

# Exception hierarchy for error handling
from .exceptions import (
    FieldConflictError,
    FieldNotFoundError,
    FieldTypeError,
    InvalidProcessorConfigError,
    MalformedRecordError,
    MalformedSpecError,
    PipelineError,
    PipelineLoadError,
    PipelineNotFoundError,
    ProcessingError,
    UnknownProcessorTypeError,
)
from .fields import MISSING, delete_field, get_field, has_field, parse_path, set_field
from .pipeline_config import PipelineConfig, ProcessorDefinition
from .processors import FieldProcessor, ProcessorConfig, StringFieldProcessor
from .registry import ProcessorRegistry, build_default_registry
from .store import PipelineStore

# Type definitions for external use
from .types import (
    PipelineMetrics,
    PipelineResult,
    Processor,
    ProcessorMetrics,
    Record,
)

__all__ = [
    # Engine
    "PipelineEngine",
    "PipelineStore",
    "SpecLoader",
    "build_default_loader",
    "build_pipeline",
    # Core
    "Pipeline",
    "PipelineProcessor",
    "ProcessorRegistry",
    "build_default_registry",
    # Configuration
    "PipelineConfig",
    "ProcessorDefinition",
    # Processors
    "FieldProcessor",
    "ProcessorConfig",
    "StringFieldProcessor",
    # Fields and codec
    "MISSING",
    "get_field",
    "set_field",
    "delete_field",
    "has_field",
    "parse_path",
    "decode_record",
    "encode_record",
    # Types
    "Processor",
    "ProcessorMetrics",
    "PipelineMetrics",
    "PipelineResult",
    "Record",
    # Exceptions
    "PipelineError",
    "PipelineLoadError",
    "MalformedSpecError",
    "UnknownProcessorTypeError",
    "InvalidProcessorConfigError",
    "ProcessingError",
    "FieldNotFoundError",
    "FieldTypeError",
    "FieldConflictError",
    "MalformedRecordError",
    "PipelineNotFoundError",
]
