"""Trim processor: strip leading and trailing whitespace from a string field."""

from .base import StringFieldProcessor


class TrimProcessor(StringFieldProcessor):
    type_name = "trim"

    def transform(self, value: str) -> str:
        return value.strip()
