"""
Shared base classes for the built-in field processors.

Each processor pairs a pydantic config model with a class that applies one
field-level operation. Configuration is validated once, when the registry
constructs the processor, so a malformed pipeline is rejected at load time
rather than in the middle of a stream of records.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError, field_validator

from ..exceptions import (
    FieldNotFoundError,
    FieldTypeError,
    InvalidProcessorConfigError,
)
from ..fields import MISSING, get_field, parse_path, set_field
from ..types import Record


def validate_field_path(value: Optional[str]) -> Optional[str]:
    """Reject field paths that resolve to no segments."""
    if value is None:
        return value
    parse_path(value)
    return value


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or str(exc)


class ProcessorConfig(BaseModel):
    """Base configuration model; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class FieldConfig(ProcessorConfig):
    """
    Configuration for processors that operate on a single field.

    Args:
        field: Dotted path of the field to process
        ignore_missing: If true and the field does not exist or is null, the
            processor quietly returns without modifying the record
    """

    field: str
    ignore_missing: StrictBool = False

    @field_validator("field")
    @classmethod
    def validate_field(cls, v: str) -> str:
        return validate_field_path(v)


class FieldProcessor(ABC):
    """Base class for configured, immutable field processors."""

    type_name: ClassVar[str]
    config_model: ClassVar[Type[ProcessorConfig]]

    def __init__(self, config: ProcessorConfig) -> None:
        self._config = config

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "FieldProcessor":
        """
        Build the processor from its raw options mapping.

        Raises:
            InvalidProcessorConfigError: If the options fail validation
        """
        try:
            config = cls.config_model.model_validate(dict(options))
        except ValidationError as exc:
            raise InvalidProcessorConfigError(
                describe_validation_error(exc),
                processor_type=cls.type_name,
                cause=exc,
            ) from exc
        return cls(config)

    @property
    def name(self) -> str:
        """Return the registered type name of this processor."""
        return self.type_name

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    @abstractmethod
    def apply(self, record: Record) -> Record:
        """Apply the processor to ``record`` and return it."""

    def __repr__(self) -> str:
        options = self._config.model_dump(exclude_defaults=True)
        return f"{self.type_name}={json.dumps(options, sort_keys=True, default=str)}"


class StringFieldConfig(FieldConfig):
    """
    Configuration for string-rewriting processors.

    Args:
        target_field: Field to assign the output value to; by default the
            source field is updated in place
    """

    target_field: Optional[str] = None

    @field_validator("target_field")
    @classmethod
    def validate_target_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_field_path(v)


class StringFieldProcessor(FieldProcessor):
    """Read a string field, rewrite it, and write the result back."""

    config_model = StringFieldConfig

    @abstractmethod
    def transform(self, value: str) -> str:
        """Return the rewritten string."""

    def apply(self, record: Record) -> Record:
        config: StringFieldConfig = self._config  # type: ignore[assignment]
        value = get_field(record, config.field)

        if value is MISSING or value is None:
            if config.ignore_missing:
                return record
            if value is MISSING:
                raise FieldNotFoundError(config.field)

        if not isinstance(value, str):
            raise FieldTypeError(
                f"value to {self.type_name} is not a string", field=config.field
            )

        set_field(record, config.target_field or config.field, self.transform(value))
        return record
