"""
Built-in field processors for docflow pipelines.

Available Processors:
    - lowercase / uppercase / trim: rewrite a string field
    - set: assign a literal value or copy another field
    - remove: delete fields (absent fields are skipped)
    - rename: move a field to a new path (never overwrites)
    - append: add values to an array field

Example Usage:
    >>> from docflow.pipelines.processors import LowercaseProcessor
    >>> step = LowercaseProcessor.from_options({"field": "user.name"})
    >>> step.apply({"user": {"name": "ADA"}})
    {'user': {'name': 'ada'}}
"""

from .append import AppendProcessor
from .base import FieldProcessor, ProcessorConfig, StringFieldProcessor
from .lowercase import LowercaseProcessor
from .remove import RemoveProcessor
from .rename import RenameProcessor
from .set_value import SetProcessor
from .trim import TrimProcessor
from .uppercase import UppercaseProcessor

BUILTIN_PROCESSORS = (
    AppendProcessor,
    LowercaseProcessor,
    RemoveProcessor,
    RenameProcessor,
    SetProcessor,
    TrimProcessor,
    UppercaseProcessor,
)

__all__ = [
    "BUILTIN_PROCESSORS",
    "FieldProcessor",
    "ProcessorConfig",
    "StringFieldProcessor",
    "AppendProcessor",
    "LowercaseProcessor",
    "RemoveProcessor",
    "RenameProcessor",
    "SetProcessor",
    "TrimProcessor",
    "UppercaseProcessor",
]
