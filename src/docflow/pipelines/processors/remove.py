"""Remove processor: delete one or more fields; absent fields are skipped."""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from ..fields import delete_field
from ..types import Record
from .base import FieldProcessor, ProcessorConfig, validate_field_path


class RemoveConfig(ProcessorConfig):
    """
    Configuration for the remove processor.

    Args:
        field: Single field to remove
        fields: Additional fields to remove
    """

    field: Optional[str] = None
    fields: List[str] = Field(default_factory=list)

    @field_validator("field")
    @classmethod
    def validate_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_field_path(v)

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: List[str]) -> List[str]:
        for path in v:
            validate_field_path(path)
        return v

    @model_validator(mode="after")
    def validate_targets(self) -> "RemoveConfig":
        if self.field is None and not self.fields:
            raise ValueError("one of 'field' or 'fields' must be set")
        return self

    @property
    def paths(self) -> Tuple[str, ...]:
        leading = (self.field,) if self.field is not None else ()
        return leading + tuple(self.fields)


class RemoveProcessor(FieldProcessor):
    type_name = "remove"
    config_model = RemoveConfig

    def apply(self, record: Record) -> Record:
        config: RemoveConfig = self._config  # type: ignore[assignment]
        for path in config.paths:
            delete_field(record, path)
        return record
