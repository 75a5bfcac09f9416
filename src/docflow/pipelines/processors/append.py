"""
Append processor: add one or more values to an array field.

An absent (or null) field becomes a new array, a scalar is converted to a
one-element array first, and an existing array is extended. Objects cannot
be appended to.
"""

from __future__ import annotations

import copy
from typing import Any, List

from pydantic import Field, StrictBool, field_validator

from ..exceptions import FieldTypeError
from ..fields import MISSING, get_field, set_field
from ..types import Record
from .base import FieldProcessor, ProcessorConfig, validate_field_path


def _same_value(left: Any, right: Any) -> bool:
    """JSON equality: booleans, integers and floats never match each other."""
    if type(left) is not type(right):
        return False
    if isinstance(left, list):
        return len(left) == len(right) and all(
            _same_value(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            _same_value(value, right[key]) for key, value in left.items()
        )
    return left == right


class AppendConfig(ProcessorConfig):
    """
    Configuration for the append processor.

    Args:
        field: Array field to append to
        value: A single value or a list of values to append
        allow_duplicates: If false, values already present are not appended
    """

    field: str
    value: Any = Field(...)
    allow_duplicates: StrictBool = False

    @field_validator("field")
    @classmethod
    def validate_field(cls, v: str) -> str:
        return validate_field_path(v)

    @property
    def values(self) -> List[Any]:
        if isinstance(self.value, list):
            return list(self.value)
        return [self.value]


class AppendProcessor(FieldProcessor):
    type_name = "append"
    config_model = AppendConfig

    def apply(self, record: Record) -> Record:
        config: AppendConfig = self._config  # type: ignore[assignment]

        current = get_field(record, config.field)
        if current is MISSING or current is None:
            target: List[Any] = []
        elif isinstance(current, list):
            target = current
        elif isinstance(current, dict):
            raise FieldTypeError("value to append to is not an array", field=config.field)
        else:
            target = [current]

        for value in config.values:
            if config.allow_duplicates or not any(
                _same_value(value, existing) for existing in target
            ):
                target.append(copy.deepcopy(value))

        if target is not current:
            set_field(record, config.field, target)
        return record
