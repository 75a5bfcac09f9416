"""Tests for the pipeline specification models."""

import pytest
from pydantic import ValidationError

from docflow.pipelines.pipeline_config import PipelineConfig


@pytest.mark.unit
class TestPipelineConfig:
    def test_minimal(self):
        config = PipelineConfig.model_validate({"id": "p1", "processors": []})
        assert config.id == "p1"
        assert config.processors == []
        assert config.on_failure == []
        assert config.description is None

    def test_processors_default_to_empty(self):
        assert PipelineConfig.model_validate({"id": "p1"}).processors == []

    def test_unwraps_single_key_definitions(self, sample_spec):
        config = PipelineConfig.model_validate(sample_spec)
        assert [d.type for d in config.processors] == ["trim", "lowercase", "rename", "set"]
        assert config.processors[2].options == {"field": "msg", "target_field": "message"}
        assert config.description == "normalize user fields"

    def test_common_keys_are_lifted(self):
        config = PipelineConfig.model_validate(
            {
                "id": "p1",
                "processors": [
                    {
                        "rename": {
                            "field": "a",
                            "target_field": "b",
                            "id": "move-a",
                            "ignore_failure": True,
                            "on_failure": [{"set": {"field": "error", "value": True}}],
                        }
                    }
                ],
            }
        )
        definition = config.processors[0]
        assert definition.id == "move-a"
        assert definition.ignore_failure is True
        assert definition.options == {"field": "a", "target_field": "b"}
        assert definition.on_failure[0].type == "set"
        assert definition.on_failure[0].options == {"field": "error", "value": True}

    def test_null_body_means_no_options(self):
        config = PipelineConfig.model_validate({"id": "p1", "processors": [{"noop": None}]})
        assert config.processors[0].options == {}

    def test_pipeline_on_failure(self):
        config = PipelineConfig.model_validate(
            {"id": "p1", "on_failure": [{"set": {"field": "failed", "value": True}}]}
        )
        assert config.on_failure[0].type == "set"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"id": ""},
            {"id": "   "},
            {"id": 5},
            {"id": "p1", "processors": {"lowercase": {"field": "a"}}},
            {"id": "p1", "processors": ["lowercase"]},
            {"id": "p1", "processors": [{}]},
            {"id": "p1", "processors": [{"lowercase": {"field": "a"}, "trim": {"field": "a"}}]},
            {"id": "p1", "processors": [{"lowercase": "a"}]},
            {"id": "p1", "processors": [], "version": 2},
            {"id": "p1", "processors": [{"lowercase": {"field": "a", "ignore_failure": "yes"}}]},
            {"id": "p1", "processors": [{"lowercase": {"field": "a", "on_failure": {}}}]},
        ],
    )
    def test_malformed_rejected(self, data):
        with pytest.raises(ValidationError):
            PipelineConfig.model_validate(data)
