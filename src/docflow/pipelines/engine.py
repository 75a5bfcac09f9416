"""
Engine facade: load pipeline specifications and process records.

PipelineEngine is the surface embedding adapters talk to. It owns a
processor registry, a pipeline store and a spec loader, and takes its
serialization options from Settings.

Example:
    >>> engine = PipelineEngine()
    >>> engine.load('{"id": "names", "processors": [{"lowercase": {"field": "user_name"}}]}')
    'names'
    >>> engine.process('{"user_name": "John Doe"}')
    '{"user_name":"john doe"}'
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from docflow.config import Settings, get_settings
from docflow.utils.logging import get_logger

from .builder import SpecLoader
from .core import Pipeline
from .exceptions import PipelineNotFoundError
from .registry import ProcessorConstructor, ProcessorRegistry, build_default_registry
from .store import PipelineStore

logger = get_logger(__name__)


class PipelineEngine:
    """
    Loads pipelines and runs JSON records through them.

    Args:
        settings: Settings instance; defaults to the cached ``get_settings()``
        registry: Processor registry; defaults to the built-in processors
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[ProcessorRegistry] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry if registry is not None else build_default_registry()
        self._store = PipelineStore()
        self._loader = SpecLoader(self._registry, self._store)
        logger.debug(
            "engine.initialized",
            processor_types=self._registry.list_types(),
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> ProcessorRegistry:
        return self._registry

    @property
    def store(self) -> PipelineStore:
        return self._store

    def register_processor(self, type_name: str, constructor: ProcessorConstructor) -> None:
        """Make a custom processor type available to later loads."""
        self._registry.register(type_name, constructor)

    def load(self, spec_text: Union[str, bytes]) -> str:
        """
        Load (or reload) a pipeline from JSON specification text.

        Returns:
            The id the pipeline is stored under

        Raises:
            PipelineLoadError: If the specification cannot be built
        """
        return self._loader.load(spec_text).id

    def load_file(self, path: Union[str, Path]) -> str:
        """Load a pipeline from a JSON or YAML file; returns its id."""
        return self._loader.load_file(path).id

    def get(self, pipeline_id: Optional[str] = None) -> Pipeline:
        """
        Return a loaded pipeline, or the most recently loaded one.

        Raises:
            PipelineNotFoundError: If no matching pipeline is loaded
        """
        return self._store.get(self._resolve_id(pipeline_id))

    def process(
        self, record_text: Union[str, bytes], pipeline_id: Optional[str] = None
    ) -> str:
        """
        Transform JSON record text with a loaded pipeline.

        Args:
            record_text: A JSON object
            pipeline_id: Pipeline to use; the most recently loaded one if None

        Raises:
            PipelineNotFoundError: If the pipeline is not loaded
            MalformedRecordError: If ``record_text`` is not a JSON object
            ProcessingError: If the pipeline fails on the record
        """
        return self._store.process(
            self._resolve_id(pipeline_id),
            record_text,
            sort_keys=self._settings.json_sort_keys,
            ensure_ascii=self._settings.json_ensure_ascii,
        )

    def _resolve_id(self, pipeline_id: Optional[str]) -> str:
        if pipeline_id is not None:
            return pipeline_id
        last_loaded = self._store.last_loaded_id
        if last_loaded is None:
            raise PipelineNotFoundError(None)
        return last_loaded
