"""
Pipeline assembly from specifications.

This module turns specification text (or an already-parsed mapping) into a
validated PipelineConfig, constructs every processor through a
ProcessorRegistry, and hands the finished Pipeline to a PipelineStore. A load
is all-or-nothing: the store only changes once every processor has been
constructed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Set, Union

import yaml
from pydantic import ValidationError

from docflow.utils.logging import get_logger

from .core import Pipeline, PipelineProcessor
from .exceptions import MalformedSpecError, PipelineLoadError
from .pipeline_config import PipelineConfig, ProcessorDefinition
from .processors.base import describe_validation_error
from .registry import ProcessorRegistry, build_default_registry
from .store import PipelineStore

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def parse_spec(spec_text: Union[str, bytes]) -> PipelineConfig:
    """
    Parse JSON specification text into a PipelineConfig.

    Raises:
        MalformedSpecError: If the text is not JSON or has the wrong shape
    """
    try:
        data = json.loads(spec_text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedSpecError(
            f"Pipeline specification is not valid JSON: {exc}", cause=exc
        ) from exc
    except RecursionError as exc:
        raise MalformedSpecError(
            "Pipeline specification is nested too deeply to decode", cause=exc
        ) from exc
    return parse_spec_mapping(data)


def parse_spec_mapping(data: Any) -> PipelineConfig:
    """
    Validate an already-decoded specification.

    Raises:
        MalformedSpecError: If the data does not match the specification shape
    """
    if isinstance(data, PipelineConfig):
        return data
    if not isinstance(data, Mapping):
        raise MalformedSpecError(
            f"Pipeline specification must be an object, got {type(data).__name__}"
        )

    pipeline_id = data.get("id") if isinstance(data.get("id"), str) else None
    try:
        return PipelineConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise MalformedSpecError(
            f"Invalid pipeline specification: {describe_validation_error(exc)}",
            pipeline_id=pipeline_id,
            cause=exc,
        ) from exc
    except RecursionError as exc:
        raise MalformedSpecError(
            "Pipeline specification is nested too deeply to validate",
            pipeline_id=pipeline_id,
            cause=exc,
        ) from exc


def _build_processors(
    definitions: Sequence[ProcessorDefinition],
    base_id: str,
    pipeline_id: str,
    registry: ProcessorRegistry,
    seen_ids: Set[str],
) -> List[PipelineProcessor]:
    processors: List[PipelineProcessor] = []
    for index, definition in enumerate(definitions):
        processor_id = definition.id or f"{base_id}[{index}].{definition.type}"
        if processor_id in seen_ids:
            raise MalformedSpecError(
                "Duplicate processor id",
                pipeline_id=pipeline_id,
                processor_index=index,
                processor_type=definition.type,
                processor_id=processor_id,
            )
        seen_ids.add(processor_id)

        try:
            processor = registry.construct(definition.type, definition.options)
        except PipelineLoadError as exc:
            raise exc.located(
                pipeline_id, index, definition.type, processor_id
            ) from exc

        handlers = _build_processors(
            definition.on_failure,
            f"{processor_id}.on_failure",
            pipeline_id,
            registry,
            seen_ids,
        )
        processors.append(
            PipelineProcessor(
                processor_id,
                processor,
                ignore_failure=definition.ignore_failure,
                on_failure=handlers,
            )
        )
    return processors


def build_pipeline(
    config: Union[Mapping[str, Any], PipelineConfig],
    registry: ProcessorRegistry,
) -> Pipeline:
    """
    Build a pipeline from configuration without storing it.

    Raises:
        MalformedSpecError: If the configuration has the wrong shape
        UnknownProcessorTypeError: If a processor type is not registered
        InvalidProcessorConfigError: If a processor rejects its options

    Example:
        >>> from docflow.pipelines.registry import build_default_registry
        >>> registry = build_default_registry()
        >>> pipeline = build_pipeline(
        ...     {"id": "names", "processors": [{"lowercase": {"field": "user_name"}}]},
        ...     registry,
        ... )
        >>> pipeline.execute({"user_name": "John Doe"})
        {'user_name': 'john doe'}
    """
    pipeline_config = parse_spec_mapping(config)
    pipeline_id = pipeline_config.id

    seen_ids: Set[str] = set()
    processors = _build_processors(
        pipeline_config.processors,
        f"{pipeline_id}.processors",
        pipeline_id,
        registry,
        seen_ids,
    )
    on_failure = _build_processors(
        pipeline_config.on_failure,
        f"{pipeline_id}.on_failure",
        pipeline_id,
        registry,
        seen_ids,
    )

    logger.debug(
        "pipeline.built",
        pipeline=pipeline_id,
        processors=[processor.id for processor in processors],
        on_failure=len(on_failure),
    )

    return Pipeline(
        pipeline_id,
        processors=processors,
        on_failure=on_failure,
        description=pipeline_config.description,
    )


class SpecLoader:
    """
    Loads pipeline specifications into a PipelineStore.

    Args:
        registry: Registry used to construct processors
        store: Store that receives successfully built pipelines
    """

    def __init__(self, registry: ProcessorRegistry, store: PipelineStore) -> None:
        self._registry = registry
        self._store = store

    @property
    def registry(self) -> ProcessorRegistry:
        return self._registry

    @property
    def store(self) -> PipelineStore:
        return self._store

    def load(self, spec_text: Union[str, bytes]) -> Pipeline:
        """
        Parse JSON specification text, build the pipeline and store it.

        Replaces any pipeline already stored under the same id. On failure
        the store is left exactly as it was.

        Raises:
            PipelineLoadError: MalformedSpecError, UnknownProcessorTypeError
                or InvalidProcessorConfigError describing the first problem
        """
        return self._install(parse_spec(spec_text))

    def load_mapping(self, data: Union[Mapping[str, Any], PipelineConfig]) -> Pipeline:
        """Like ``load`` for an already-decoded specification."""
        return self._install(parse_spec_mapping(data))

    def load_file(self, path: Union[str, Path]) -> Pipeline:
        """
        Load a specification from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            MalformedSpecError: If the file cannot be parsed
            OSError: If the file cannot be read
        """
        spec_path = Path(path)
        text = spec_path.read_text(encoding="utf-8")

        if spec_path.suffix.lower() in YAML_SUFFIXES:
            try:
                data = yaml.safe_load(text)
            except (yaml.YAMLError, RecursionError) as exc:
                raise MalformedSpecError(
                    f"Pipeline specification '{spec_path}' is not valid YAML: {exc}",
                    cause=exc,
                ) from exc
            return self.load_mapping(data)

        if spec_path.suffix.lower() == ".json":
            return self.load(text)

        raise MalformedSpecError(
            f"Unsupported specification file type '{spec_path.suffix}' "
            f"for '{spec_path}'; expected .json, .yaml or .yml"
        )

    def _install(self, config: PipelineConfig) -> Pipeline:
        pipeline = build_pipeline(config, self._registry)
        replaced = self._store.put(pipeline)
        logger.info(
            "pipeline.reloaded" if replaced is not None else "pipeline.loaded",
            pipeline=pipeline.id,
            processors=len(pipeline),
        )
        return pipeline


def build_default_loader(store: Optional[PipelineStore] = None) -> SpecLoader:
    """Return a SpecLoader using the built-in processors and a new or given store."""
    return SpecLoader(
        build_default_registry(), store if store is not None else PipelineStore()
    )
