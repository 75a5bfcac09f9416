"""
Shared fixtures and helper processors for pipeline tests.
"""

from typing import Any, Dict, List

import pytest

from docflow.pipelines.builder import SpecLoader
from docflow.pipelines.exceptions import ProcessingError
from docflow.pipelines.registry import ProcessorRegistry, build_default_registry
from docflow.pipelines.store import PipelineStore
from docflow.pipelines.types import Record


class RecordingProcessor:
    """Processor that tags the record and counts its calls."""

    def __init__(self, tag: str, calls: List[str] = None):
        self.tag = tag
        self.calls = calls if calls is not None else []

    @property
    def name(self) -> str:
        return "recording"

    def apply(self, record: Record) -> Record:
        self.calls.append(self.tag)
        record.setdefault("trail", []).append(self.tag)
        return record


class FailingProcessor:
    """Processor that mutates the record and then fails."""

    def __init__(self, message: str = "Intentional test failure", exc_type=ProcessingError):
        self.message = message
        self.exc_type = exc_type

    @property
    def name(self) -> str:
        return "failing"

    def apply(self, record: Record) -> Record:
        record["touched_by_failing"] = True
        raise self.exc_type(self.message)


@pytest.fixture
def registry() -> ProcessorRegistry:
    return build_default_registry()


@pytest.fixture
def store() -> PipelineStore:
    return PipelineStore()


@pytest.fixture
def loader(registry: ProcessorRegistry, store: PipelineStore) -> SpecLoader:
    return SpecLoader(registry, store)


@pytest.fixture
def sample_spec() -> Dict[str, Any]:
    """Provide a small pipeline specification as a dictionary."""
    return {
        "id": "logs-sample",
        "description": "normalize user fields",
        "processors": [
            {"trim": {"field": "user.name"}},
            {"lowercase": {"field": "user.name"}},
            {"rename": {"field": "msg", "target_field": "message"}},
            {"set": {"field": "event.kind", "value": "log"}},
        ],
    }


@pytest.fixture
def sample_record() -> Dict[str, Any]:
    return {"user": {"name": "  Ada LOVELACE "}, "msg": "hello"}
