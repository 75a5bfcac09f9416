"""
In-memory store of loaded pipelines.

The store maps pipeline ids to fully built Pipeline objects. Pipelines are
immutable once built, so replacing one is a single assignment under the
lock: concurrent readers observe either the old chain or the new one.
"""

from __future__ import annotations

from threading import RLock
from typing import Dict, List, Optional, Union

from docflow.utils.logging import get_logger

from .codec import decode_record, encode_record
from .core import Pipeline
from .exceptions import PipelineNotFoundError

logger = get_logger(__name__)


class PipelineStore:
    """Thread-safe mapping of pipeline id to Pipeline."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._pipelines: Dict[str, Pipeline] = {}
        self._last_loaded_id: Optional[str] = None

    def put(self, pipeline: Pipeline) -> Optional[Pipeline]:
        """Insert or replace a pipeline; returns the replaced one, if any."""
        with self._lock:
            previous = self._pipelines.get(pipeline.id)
            self._pipelines[pipeline.id] = pipeline
            self._last_loaded_id = pipeline.id
        return previous

    def get(self, pipeline_id: str) -> Pipeline:
        """
        Look up a pipeline by id.

        Raises:
            PipelineNotFoundError: If nothing is loaded under ``pipeline_id``
        """
        with self._lock:
            pipeline = self._pipelines.get(pipeline_id)
        if pipeline is None:
            raise PipelineNotFoundError(pipeline_id)
        return pipeline

    def process(
        self,
        pipeline_id: str,
        record_text: Union[str, bytes],
        sort_keys: bool = False,
        ensure_ascii: bool = False,
    ) -> str:
        """
        Run JSON record text through a stored pipeline.

        Raises:
            MalformedRecordError: If ``record_text`` is not a JSON object
            PipelineNotFoundError: If ``pipeline_id`` is not loaded
            ProcessingError: If the pipeline fails on the record
        """
        record = decode_record(record_text)
        pipeline = self.get(pipeline_id)
        try:
            result = pipeline.execute(record)
        except Exception:
            logger.debug("pipeline.process.failed", pipeline=pipeline_id)
            raise
        return encode_record(result, sort_keys=sort_keys, ensure_ascii=ensure_ascii)

    @property
    def last_loaded_id(self) -> Optional[str]:
        """Id of the most recently stored pipeline."""
        with self._lock:
            return self._last_loaded_id

    def ids(self) -> List[str]:
        with self._lock:
            return sorted(self._pipelines)

    def __contains__(self, pipeline_id: object) -> bool:
        with self._lock:
            return pipeline_id in self._pipelines

    def __len__(self) -> int:
        with self._lock:
            return len(self._pipelines)
