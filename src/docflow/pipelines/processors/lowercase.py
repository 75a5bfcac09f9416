"""Lowercase processor: convert a string field to its lowercase equivalent."""

from .base import StringFieldProcessor


class LowercaseProcessor(StringFieldProcessor):
    """
    Convert a string to lowercase.

    Example:
        >>> step = LowercaseProcessor.from_options({"field": "user_name"})
        >>> step.apply({"user_name": "John Doe"})
        {'user_name': 'john doe'}
    """

    type_name = "lowercase"

    def transform(self, value: str) -> str:
        return value.lower()
