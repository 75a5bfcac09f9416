"""
Set processor: assign a literal value, or a copy of another field, to a field.

If the field already exists its value is replaced. Intermediate objects are
created as needed.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from pydantic import AliasChoices, Field, StrictBool, field_validator, model_validator

from ..exceptions import FieldNotFoundError
from ..fields import MISSING, get_field, set_field
from ..types import Record
from .base import FieldProcessor, ProcessorConfig, validate_field_path


class SetConfig(ProcessorConfig):
    """
    Configuration for the set processor.

    Args:
        field: Field to assign (``target_field`` is accepted as an alias)
        value: Literal JSON value to assign; null is a valid value
        copy_from: Field whose value is copied into ``field``
        ignore_missing: With copy_from, quietly skip when the source is absent
    """

    field: str = Field(validation_alias=AliasChoices("field", "target_field"))
    value: Any = None
    copy_from: Optional[str] = None
    ignore_missing: StrictBool = False

    @field_validator("field", "copy_from")
    @classmethod
    def validate_paths(cls, v: Optional[str]) -> Optional[str]:
        return validate_field_path(v)

    @model_validator(mode="after")
    def validate_source(self) -> "SetConfig":
        has_value = "value" in self.model_fields_set
        has_copy_from = self.copy_from is not None
        if has_value == has_copy_from:
            raise ValueError("exactly one of 'value' or 'copy_from' must be set")
        return self


class SetProcessor(FieldProcessor):
    """Set one field to the configured value."""

    type_name = "set"
    config_model = SetConfig

    def apply(self, record: Record) -> Record:
        config: SetConfig = self._config  # type: ignore[assignment]

        if config.copy_from is not None:
            value = get_field(record, config.copy_from)
            if value is MISSING:
                if config.ignore_missing:
                    return record
                raise FieldNotFoundError(config.copy_from)
        else:
            value = config.value

        # Never share mutable config or source values with the record.
        set_field(record, config.field, copy.deepcopy(value))
        return record
