"""Tests for dotted field-path access."""

import pytest

from docflow.pipelines.exceptions import FieldConflictError, FieldTypeError
from docflow.pipelines.fields import (
    MISSING,
    delete_field,
    format_path,
    get_field,
    has_field,
    parse_path,
    set_field,
)


@pytest.mark.unit
class TestParsePath:
    def test_splits_on_dots(self):
        assert parse_path("a.b.c") == ("a", "b", "c")

    def test_single_segment(self):
        assert parse_path("user_name") == ("user_name",)

    def test_escaped_dot_is_literal(self):
        assert parse_path("labels.app\\.kubernetes\\.io") == ("labels", "app.kubernetes.io")

    def test_escaped_backslash(self):
        assert parse_path("a\\\\b") == ("a\\b",)

    def test_empty_segments_are_dropped(self):
        assert parse_path("a..b.") == ("a", "b")

    @pytest.mark.parametrize("key", ["", ".", "..."])
    def test_empty_path_rejected(self, key):
        with pytest.raises(ValueError, match="empty"):
            parse_path(key)

    def test_format_path_escapes_dots(self):
        assert format_path(("a.b", "c")) == "a\\.b.c"
        assert parse_path(format_path(("a.b", "c"))) == ("a.b", "c")


@pytest.mark.unit
class TestGetField:
    def test_top_level(self):
        assert get_field({"a": 1}, "a") == 1

    def test_nested(self):
        assert get_field({"user": {"address": {"city": "Oslo"}}}, "user.address.city") == "Oslo"

    def test_absent_returns_missing(self):
        assert get_field({"a": {}}, "a.b") is MISSING
        assert get_field({}, "a.b.c") is MISSING

    def test_non_mapping_intermediate_returns_missing(self):
        assert get_field({"a": "text"}, "a.b") is MISSING
        assert get_field({"a": [1, 2]}, "a.0") is MISSING

    def test_null_is_a_value(self):
        record = {"a": None}
        assert get_field(record, "a") is None
        assert has_field(record, "a")

    def test_segment_sequence_addresses_literal_keys(self):
        record = {"app.kubernetes.io": "web"}
        assert get_field(record, ["app.kubernetes.io"]) == "web"
        assert get_field(record, "app\\.kubernetes\\.io") == "web"

    def test_missing_is_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"


@pytest.mark.unit
class TestSetField:
    def test_sets_top_level(self):
        record = {}
        assert set_field(record, "a", 1) is record
        assert record == {"a": 1}

    def test_creates_intermediates(self):
        record = {"keep": True}
        set_field(record, "event.outcome.code", 7)
        assert record == {"keep": True, "event": {"outcome": {"code": 7}}}

    def test_extends_existing_object(self):
        record = {"user": {"name": "ada"}}
        set_field(record, "user.id", 42)
        assert record == {"user": {"name": "ada", "id": 42}}

    def test_overwrites_existing_value(self):
        record = {"a": {"b": 1}}
        set_field(record, "a.b", 2)
        assert record == {"a": {"b": 2}}

    def test_non_mapping_intermediate_raises_and_leaves_record(self):
        record = {"a": "text"}
        with pytest.raises(FieldTypeError, match="target key <a> is not an object"):
            set_field(record, "a.b.c", 1)
        assert record == {"a": "text"}

    def test_failure_deep_in_path_creates_nothing(self):
        record = {"a": {"b": 5}}
        with pytest.raises(FieldTypeError):
            set_field(record, "a.b.c", 1)
        assert record == {"a": {"b": 5}}

    def test_no_overwrite_conflict(self):
        record = {"a": {"b": 1}}
        with pytest.raises(FieldConflictError):
            set_field(record, "a.b", 2, overwrite=False)
        assert record == {"a": {"b": 1}}

    def test_no_overwrite_allows_new_key(self):
        record = {"a": {}}
        set_field(record, "a.b", 2, overwrite=False)
        assert record == {"a": {"b": 2}}

    @pytest.mark.parametrize(
        "path,value",
        [
            ("a", "text"),
            ("a.b", 3.5),
            ("x.y.z", None),
            ("list", [1, {"k": "v"}]),
            ("obj.inner", {"nested": True}),
            ("labels.app\\.io", False),
        ],
    )
    def test_get_after_set_returns_value(self, path, value):
        record = {"a": {"existing": 1}, "other": "keep"}
        set_field(record, path, value)
        assert get_field(record, path) == value


@pytest.mark.unit
class TestDeleteField:
    def test_returns_removed_value(self):
        record = {"a": {"b": 1, "c": 2}}
        assert delete_field(record, "a.b") == 1
        assert record == {"a": {"c": 2}}

    def test_absent_is_noop(self):
        record = {"a": {"c": 2}}
        assert delete_field(record, "a.b") is MISSING
        assert delete_field(record, "x.y") is MISSING
        assert delete_field(record, "a.c.d") is MISSING
        assert record == {"a": {"c": 2}}

    def test_leaves_empty_parent(self):
        record = {"a": {"b": 1}}
        delete_field(record, "a.b")
        assert record == {"a": {}}
