"""Tests for building and loading pipelines from specifications."""

import json

import pytest

from docflow.pipelines.builder import (
    build_default_loader,
    build_pipeline,
    parse_spec,
)
from docflow.pipelines.exceptions import (
    InvalidProcessorConfigError,
    MalformedSpecError,
    PipelineLoadError,
    UnknownProcessorTypeError,
)


@pytest.mark.unit
class TestParseSpec:
    def test_parses_json(self, sample_spec):
        config = parse_spec(json.dumps(sample_spec))
        assert config.id == "logs-sample"
        assert len(config.processors) == 4

    def test_accepts_bytes(self):
        assert parse_spec(b'{"id": "p1", "processors": []}').id == "p1"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "not json",
            '{"id": "p1", "processors": [',
            "[]",
            '"just a string"',
            '{"processors": []}',
            '{"id": "", "processors": []}',
            '{"id": "p1", "processors": "lowercase"}',
            '{"id": "p1", "processors": [{}]}',
            '{"id": "p1", "processors": [{"a": {}, "b": {}}]}',
            '{"id": "p1", "processors": [{"lowercase": 1}]}',
            '{"id": "p1", "processors": [], "unexpected": true}',
        ],
    )
    def test_malformed_spec(self, text):
        with pytest.raises(MalformedSpecError):
            parse_spec(text)

    def test_runaway_nesting_is_malformed(self):
        with pytest.raises(MalformedSpecError, match="nested too deeply"):
            parse_spec("[" * 200000)

    def test_malformed_spec_names_pipeline(self):
        with pytest.raises(MalformedSpecError) as exc_info:
            parse_spec('{"id": "p1", "processors": [{}]}')
        assert exc_info.value.pipeline_id == "p1"
        assert "index 0" in str(exc_info.value)


@pytest.mark.unit
class TestBuildPipeline:
    def test_builds_without_storing(self, registry, sample_spec, sample_record):
        pipeline = build_pipeline(sample_spec, registry)
        assert pipeline.id == "logs-sample"
        assert pipeline.description == "normalize user fields"
        assert pipeline.execute(sample_record) == {
            "user": {"name": "ada lovelace"},
            "message": "hello",
            "event": {"kind": "log"},
        }

    def test_generated_processor_ids(self, registry, sample_spec):
        pipeline = build_pipeline(sample_spec, registry)
        assert [p.id for p in pipeline.processors] == [
            "logs-sample.processors[0].trim",
            "logs-sample.processors[1].lowercase",
            "logs-sample.processors[2].rename",
            "logs-sample.processors[3].set",
        ]

    def test_explicit_and_nested_ids(self, registry):
        pipeline = build_pipeline(
            {
                "id": "p1",
                "processors": [
                    {
                        "rename": {
                            "id": "move",
                            "field": "a",
                            "target_field": "b",
                            "on_failure": [{"set": {"field": "err", "value": 1}}],
                        }
                    }
                ],
                "on_failure": [{"set": {"field": "failed", "value": True}}],
            },
            registry,
        )
        node = pipeline.processors[0]
        assert node.id == "move"
        assert node.on_failure[0].id == "move.on_failure[0].set"
        assert pipeline.on_failure[0].id == "p1.on_failure[0].set"

    def test_duplicate_ids_rejected(self, registry):
        with pytest.raises(MalformedSpecError, match="Duplicate processor id"):
            build_pipeline(
                {
                    "id": "p1",
                    "processors": [
                        {"trim": {"id": "same", "field": "a"}},
                        {"lowercase": {"id": "same", "field": "a"}},
                    ],
                },
                registry,
            )

    def test_unknown_type_is_located(self, registry):
        with pytest.raises(UnknownProcessorTypeError) as exc_info:
            build_pipeline(
                {"id": "p1", "processors": [{"trim": {"field": "a"}}, {"shout": {"field": "a"}}]},
                registry,
            )
        error = exc_info.value
        assert error.pipeline_id == "p1"
        assert error.processor_index == 1
        assert error.processor_type == "shout"
        assert error.processor_id == "p1.processors[1].shout"
        assert "index=1" in str(error)

    def test_invalid_config_is_located(self, registry):
        with pytest.raises(InvalidProcessorConfigError) as exc_info:
            build_pipeline(
                {"id": "p1", "processors": [{"rename": {"field": "a"}}]},
                registry,
            )
        error = exc_info.value
        assert error.processor_index == 0
        assert error.processor_type == "rename"
        assert error.cause is not None
        assert isinstance(error.__cause__, PipelineLoadError)

    def test_first_error_wins(self, registry):
        with pytest.raises(InvalidProcessorConfigError) as exc_info:
            build_pipeline(
                {
                    "id": "p1",
                    "processors": [{"lowercase": {}}, {"unknown": {}}],
                },
                registry,
            )
        assert exc_info.value.processor_index == 0

    def test_invalid_nested_handler(self, registry):
        with pytest.raises(UnknownProcessorTypeError) as exc_info:
            build_pipeline(
                {
                    "id": "p1",
                    "processors": [
                        {"trim": {"field": "a", "on_failure": [{"nope": {}}]}}
                    ],
                },
                registry,
            )
        assert exc_info.value.processor_id == "p1.processors[0].trim.on_failure[0].nope"


@pytest.mark.unit
class TestSpecLoader:
    def test_load_stores_pipeline(self, loader, store, sample_spec):
        pipeline = loader.load(json.dumps(sample_spec))
        assert store.get("logs-sample") is pipeline
        assert store.last_loaded_id == "logs-sample"

    def test_reload_replaces(self, loader, store):
        loader.load('{"id": "p1", "processors": [{"lowercase": {"field": "a"}}]}')
        loader.load('{"id": "p1", "processors": [{"uppercase": {"field": "a"}}]}')
        assert len(store) == 1
        assert store.get("p1").execute({"a": "Mixed"}) == {"a": "MIXED"}

    def test_failed_load_leaves_store_unchanged(self, loader, store):
        original = loader.load('{"id": "p1", "processors": [{"lowercase": {"field": "a"}}]}')
        with pytest.raises(UnknownProcessorTypeError):
            loader.load('{"id": "p1", "processors": [{"frobnicate": {"field": "a"}}]}')
        with pytest.raises(MalformedSpecError):
            loader.load('{"id": "p2", "processors": [{}]}')
        assert store.get("p1") is original
        assert store.ids() == ["p1"]

    def test_load_mapping(self, loader, store, sample_spec):
        loader.load_mapping(sample_spec)
        assert "logs-sample" in store

    def test_load_yaml_file(self, loader, store, tmp_path):
        spec_file = tmp_path / "pipeline.yaml"
        spec_file.write_text(
            "id: from-yaml\n"
            "processors:\n"
            "  - uppercase:\n"
            "      field: code\n"
            "  - append:\n"
            "      field: tags\n"
            "      value: loaded\n",
            encoding="utf-8",
        )
        pipeline = loader.load_file(spec_file)
        assert pipeline.id == "from-yaml"
        assert store.get("from-yaml").execute({"code": "ab"}) == {"code": "AB", "tags": ["loaded"]}

    def test_load_json_file(self, loader, tmp_path, sample_spec):
        spec_file = tmp_path / "pipeline.json"
        spec_file.write_text(json.dumps(sample_spec), encoding="utf-8")
        assert loader.load_file(str(spec_file)).id == "logs-sample"

    def test_invalid_yaml_file(self, loader, tmp_path):
        spec_file = tmp_path / "broken.yml"
        spec_file.write_text("id: [unclosed\n", encoding="utf-8")
        with pytest.raises(MalformedSpecError, match="not valid YAML"):
            loader.load_file(spec_file)

    def test_unsupported_file_type(self, loader, tmp_path):
        spec_file = tmp_path / "pipeline.toml"
        spec_file.write_text('id = "p1"\n', encoding="utf-8")
        with pytest.raises(MalformedSpecError, match="Unsupported"):
            loader.load_file(spec_file)

    def test_default_loader(self):
        loader = build_default_loader()
        loader.load('{"id": "p1", "processors": []}')
        assert loader.store.ids() == ["p1"]
        assert "set" in loader.registry
