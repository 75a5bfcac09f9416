"""
Processor registry: maps processor type names to constructors.

A constructor is any callable that accepts the processor's options mapping
and returns a configured Processor. The registry is an explicit object that
callers create and pass around; ``build_default_registry`` returns a fresh
one pre-populated with the built-in processors.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .exceptions import (
    InvalidProcessorConfigError,
    PipelineLoadError,
    UnknownProcessorTypeError,
)
from .processors import BUILTIN_PROCESSORS
from .processors.base import describe_validation_error
from .types import Processor

logger = logging.getLogger(__name__)

ProcessorConstructor = Callable[[Mapping[str, Any]], Processor]


class ProcessorRegistry:
    """
    Registry of processor constructors keyed by type name.

    Re-registering a name replaces the previous constructor (last write
    wins). All access is serialized with a lock so registration can race
    with pipeline loading safely.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._constructors: Dict[str, ProcessorConstructor] = {}

    # --- Registration ---------------------------------------------------------
    def register(self, type_name: str, constructor: ProcessorConstructor) -> None:
        """
        Register a constructor under ``type_name``.

        Raises:
            ValueError: If the name is empty or the constructor is not callable
        """
        if not type_name or not type_name.strip():
            raise ValueError("Processor type name cannot be empty")
        if not callable(constructor):
            raise ValueError(f"Constructor for processor '{type_name}' must be callable")

        with self._lock:
            if type_name in self._constructors:
                logger.warning(f"Overriding existing processor type: {type_name}")
            self._constructors[type_name] = constructor
        logger.debug(f"Registered processor type: {type_name}")

    def unregister(self, type_name: str) -> bool:
        """Remove ``type_name``; returns False if it was not registered."""
        with self._lock:
            return self._constructors.pop(type_name, None) is not None

    def get_constructor(self, type_name: str) -> Optional[ProcessorConstructor]:
        with self._lock:
            return self._constructors.get(type_name)

    def list_types(self) -> List[str]:
        """Return all registered type names, sorted."""
        with self._lock:
            return sorted(self._constructors)

    def __contains__(self, type_name: object) -> bool:
        with self._lock:
            return type_name in self._constructors

    def __len__(self) -> int:
        with self._lock:
            return len(self._constructors)

    # --- Construction ---------------------------------------------------------
    def construct(self, type_name: str, options: Mapping[str, Any]) -> Processor:
        """
        Build a configured processor.

        Raises:
            UnknownProcessorTypeError: If ``type_name`` is not registered
            InvalidProcessorConfigError: If the processor rejects ``options``
        """
        constructor = self.get_constructor(type_name)
        if constructor is None:
            raise UnknownProcessorTypeError(
                f"processor type '{type_name}' not found; "
                f"available: {self.list_types()}",
                processor_type=type_name,
            )

        try:
            processor = constructor(options)
        except PipelineLoadError:
            raise
        except ValidationError as exc:
            raise InvalidProcessorConfigError(
                describe_validation_error(exc), processor_type=type_name, cause=exc
            ) from exc
        except Exception as exc:
            raise InvalidProcessorConfigError(
                f"constructor failed: {exc!r}", processor_type=type_name, cause=exc
            ) from exc

        if not isinstance(processor, Processor):
            raise InvalidProcessorConfigError(
                f"constructor returned {type(processor).__name__}, which does not "
                "implement the Processor interface",
                processor_type=type_name,
            )
        return processor


def build_default_registry() -> ProcessorRegistry:
    """Return a new registry holding every built-in processor."""
    registry = ProcessorRegistry()
    for processor_class in BUILTIN_PROCESSORS:
        registry.register(processor_class.type_name, processor_class.from_options)
    return registry
