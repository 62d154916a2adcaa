"""Tests for utility functions."""

from config_lens.utils import concat_unique
from config_lens.utils import deep_merge
from config_lens.utils import flatten_object
from config_lens.utils import json_equal


class TestDeepMerge:
    """Test deep_merge function."""

    def test_empty_dicts(self):
        """Test merging empty dictionaries."""
        assert deep_merge({}, {}) == {}

    def test_overlay_wins(self):
        """Test overlay takes precedence for simple values."""
        base = {"project": "/a", "target": "/a/x"}
        overlay = {"target": "/a/y"}
        assert deep_merge(base, overlay) == {"project": "/a", "target": "/a/y"}

    def test_nested_merge(self):
        """Test merging nested dictionaries."""
        base = {"selection": {"project": "/a", "target": "/a/x"}, "other": 1}
        overlay = {"selection": {"target": "/a/y"}}
        result = deep_merge(base, overlay)
        assert result == {"selection": {"project": "/a", "target": "/a/y"}, "other": 1}

    def test_dict_replaces_non_dict(self):
        """Test dict in overlay replaces a scalar in base."""
        assert deep_merge({"selection": "stale"}, {"selection": {"target": "/a"}}) == {"selection": {"target": "/a"}}

    def test_lists_not_merged(self):
        """Test lists are replaced, not merged."""
        assert deep_merge({"a": [1, 2, 3]}, {"a": [4, 5]}) == {"a": [4, 5]}

    def test_original_not_modified(self):
        """Test that original dicts are not modified."""
        base = {"a": {"b": 1}}
        overlay = {"a": {"c": 2}}
        result = deep_merge(base, overlay)

        assert result == {"a": {"b": 1, "c": 2}}
        assert base == {"a": {"b": 1}}
        assert overlay == {"a": {"c": 2}}


class TestJsonEqual:
    """Test structural equality of JSON values."""

    def test_nested_structures_equal(self):
        """Test deep structures compare by value."""
        left = {"matcher": "Bash", "hooks": [{"type": "command", "command": "echo hi"}]}
        right = {"hooks": [{"type": "command", "command": "echo hi"}], "matcher": "Bash"}
        assert json_equal(left, right)

    def test_array_order_matters(self):
        """Test arrays with the same items in another order differ."""
        assert not json_equal([1, 2], [2, 1])

    def test_bool_never_equals_number(self):
        """Test True and 1 are different JSON values."""
        assert not json_equal(True, 1)
        assert not json_equal([0], [False])
        assert json_equal(False, False)

    def test_int_equals_float(self):
        """Test 1 and 1.0 are the same JSON number."""
        assert json_equal(1, 1.0)

    def test_object_vs_array(self):
        """Test different container types never compare equal."""
        assert not json_equal({}, [])
        assert not json_equal("a", ["a"])

    def test_null(self):
        """Test None compares only with None."""
        assert json_equal(None, None)
        assert not json_equal(None, 0)


class TestConcatUnique:
    """Test de-duplicating array concatenation."""

    def test_appends_novel_items(self):
        """Test items not yet present are appended in order."""
        assert concat_unique([1, 2], [3, 4]) == [1, 2, 3, 4]

    def test_drops_structural_duplicates(self):
        """Test duplicates are detected by structure, not identity."""
        existing = [{"matcher": "Bash"}]
        incoming = [{"matcher": "Bash"}, {"matcher": "Edit"}]
        assert concat_unique(existing, incoming) == [{"matcher": "Bash"}, {"matcher": "Edit"}]

    def test_equals_unique_existing_then_novel_incoming(self):
        """Test result is the unique items of both arrays in first-seen order."""
        existing = ["a", "b", "a"]
        incoming = ["c", "b", "c", "d"]
        assert concat_unique(existing, incoming) == ["a", "b", "c", "d"]

    def test_arguments_not_modified(self):
        """Test neither input list is modified."""
        existing = [1]
        incoming = [2]
        concat_unique(existing, incoming)
        assert existing == [1]
        assert incoming == [2]


class TestFlattenObject:
    """Test dot-path flattening."""

    def test_empty(self):
        """Test flattening an empty object."""
        assert flatten_object({}) == []

    def test_objects_recorded_and_recursed(self):
        """Test nested objects appear at their own path and their children's."""
        data = {"editor": {"tabSize": 2, "font": {"size": 12}}}
        assert flatten_object(data) == [
            ("editor", {"tabSize": 2, "font": {"size": 12}}),
            ("editor.tabSize", 2),
            ("editor.font", {"size": 12}),
            ("editor.font.size", 12),
        ]

    def test_arrays_are_leaves(self):
        """Test arrays are not recursed into, even when holding objects."""
        data = {"hooks": {"PreToolUse": [{"matcher": "Bash"}]}}
        assert flatten_object(data) == [
            ("hooks", {"PreToolUse": [{"matcher": "Bash"}]}),
            ("hooks.PreToolUse", [{"matcher": "Bash"}]),
        ]
