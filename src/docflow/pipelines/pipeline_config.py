"""
Configuration models for pipeline specifications.

A specification is a JSON (or YAML) object::

    {
      "id": "logs-sample",
      "description": "optional text",
      "processors": [
        {"lowercase": {"field": "user.name"}},
        {"rename": {"field": "msg", "target_field": "message",
                    "on_failure": [{"set": {"field": "error", "value": true}}]}}
      ],
      "on_failure": [{"set": {"field": "event.kind", "value": "pipeline_error"}}]
    }

Each processor definition is a single-key mapping from type name to options.
The keys ``id``, ``ignore_failure`` and ``on_failure`` are common to every
processor and are lifted out here; everything else is passed to the
processor's own constructor.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

COMMON_PROCESSOR_KEYS = ("id", "ignore_failure", "on_failure")


def _unwrap_definition(value: Any, position: int) -> Any:
    if isinstance(value, ProcessorDefinition):
        return value
    if not isinstance(value, Mapping):
        raise ValueError(
            f"processor definition at index {position} must be an object, "
            f"got {type(value).__name__}"
        )
    if len(value) == 0:
        raise ValueError(f"processor definition at index {position} cannot be empty")
    if len(value) > 1:
        raise ValueError(
            f"processor definition at index {position} must have exactly one key, "
            f"got {sorted(value)}"
        )

    (type_name, body), = value.items()
    if body is None:
        body = {}
    if not isinstance(body, Mapping):
        raise ValueError(
            f"configuration for processor '{type_name}' at index {position} "
            "must be an object"
        )

    options = dict(body)
    common = {key: options.pop(key) for key in COMMON_PROCESSOR_KEYS if key in options}
    return {"type": type_name, "options": options, **common}


def _unwrap_definitions(value: Any) -> Any:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"must be a list of processor definitions, got {type(value).__name__}")
    return [_unwrap_definition(item, position) for position, item in enumerate(value)]


class ProcessorDefinition(BaseModel):
    """
    One processor entry of a pipeline specification.

    Args:
        type: Registered processor type name (the single key of the entry)
        options: Processor-specific options passed to its constructor
        id: Explicit processor id; generated from the position when omitted
        ignore_failure: Continue with the record unchanged when this
            processor fails
        on_failure: Handlers run against the record when this processor fails
    """

    model_config = ConfigDict(extra="forbid")

    type: StrictStr
    options: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[StrictStr] = None
    ignore_failure: StrictBool = False
    on_failure: List["ProcessorDefinition"] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("processor type name cannot be empty")
        return v

    @field_validator("on_failure", mode="before")
    @classmethod
    def unwrap_on_failure(cls, v: Any) -> Any:
        return _unwrap_definitions(v)


class PipelineConfig(BaseModel):
    """
    Declarative description of a pipeline.

    Args:
        id: Non-empty pipeline identifier; the key in the pipeline store
        description: Free-form text
        processors: Processor definitions in execution order (may be empty)
        on_failure: Handlers run against the record when the chain fails
    """

    model_config = ConfigDict(extra="forbid")

    id: StrictStr
    description: Optional[StrictStr] = None
    processors: List[ProcessorDefinition] = Field(default_factory=list)
    on_failure: List[ProcessorDefinition] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Pipeline id cannot be empty")
        return v

    @field_validator("processors", "on_failure", mode="before")
    @classmethod
    def unwrap_processors(cls, v: Any) -> Any:
        return _unwrap_definitions(v)


ProcessorDefinition.model_rebuild()
