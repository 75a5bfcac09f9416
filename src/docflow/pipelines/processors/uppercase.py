"""Uppercase processor: convert a string field to its uppercase equivalent."""

from .base import StringFieldProcessor


class UppercaseProcessor(StringFieldProcessor):
    """Convert a string to uppercase."""

    type_name = "uppercase"

    def transform(self, value: str) -> str:
        return value.upper()
