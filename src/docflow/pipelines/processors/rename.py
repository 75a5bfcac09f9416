"""
Rename processor: move a field's value to a new path.

The target must not exist; renaming never overwrites data. If writing the
target fails, the source field is restored before the error is raised.
"""

from __future__ import annotations

from pydantic import field_validator

from ..exceptions import FieldConflictError, FieldNotFoundError, ProcessingError
from ..fields import MISSING, delete_field, get_field, has_field, set_field
from ..types import Record
from .base import FieldConfig, FieldProcessor, validate_field_path


class RenameConfig(FieldConfig):
    """
    Configuration for the rename processor.

    Args:
        target_field: New path for the value
    """

    target_field: str

    @field_validator("target_field")
    @classmethod
    def validate_target_field(cls, v: str) -> str:
        return validate_field_path(v)


class RenameProcessor(FieldProcessor):
    type_name = "rename"
    config_model = RenameConfig

    def apply(self, record: Record) -> Record:
        config: RenameConfig = self._config  # type: ignore[assignment]

        value = get_field(record, config.field)
        if value is MISSING:
            if config.ignore_missing:
                return record
            raise FieldNotFoundError(config.field)

        if has_field(record, config.target_field):
            raise FieldConflictError(
                f"target key <{config.target_field}> already exists",
                field=config.target_field,
            )

        delete_field(record, config.field)
        try:
            set_field(record, config.target_field, value, overwrite=False)
        except ProcessingError:
            set_field(record, config.field, value)
            raise
        return record
