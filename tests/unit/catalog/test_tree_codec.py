"""Tests for flattening and rebuilding nested locale documents."""

import pytest

from translation_manager.catalog.exceptions import KeyConflictError, TreeShapeError
from translation_manager.catalog.tree_codec import find_conflicts, flatten, unflatten


class TestFlatten:
    """Nested objects become dotted-key pairs."""

    def test_nested_keys_are_joined_with_dots(self):
        tree = {"a": {"b": "x", "c": {"d": "y"}}, "e": "z"}
        assert flatten(tree) == [("a.b", "x"), ("a.c.d", "y"), ("e", "z")]

    def test_arrays_are_leaves(self):
        assert flatten({"list": ["one", {"two": 2}]}) == [("list", ["one", {"two": 2}])]

    def test_scalars_are_kept_as_is(self):
        tree = {"n": 1, "f": 1.5, "b": False, "none": None, "empty": ""}
        assert dict(flatten(tree)) == tree

    def test_empty_object_produces_nothing(self):
        assert flatten({"a": {}}) == []

    def test_non_object_root_raises(self):
        with pytest.raises(TreeShapeError):
            flatten(["not", "an", "object"])

    def test_unsupported_leaf_raises(self):
        with pytest.raises(TreeShapeError):
            flatten({"a": {"b": object()}})


class TestUnflatten:
    """Dotted-key pairs become nested objects again."""

    def test_round_trip(self):
        tree = {
            "common": {"save": "Save", "nested": {"deep": "value"}},
            "count": 3,
            "items": ["a", "b"],
            "missing": None,
        }
        assert unflatten(flatten(tree)) == tree

    def test_input_order_does_not_matter(self):
        pairs = [("a.c.d", "y"), ("e", "z"), ("a.b", "x")]
        assert unflatten(pairs) == unflatten(list(reversed(pairs)))

    def test_shallow_keys_come_first(self):
        result = unflatten([("z.deep.key", 1), ("a", 2)])
        assert list(result) == ["a", "z"]

    def test_leaf_then_child_conflicts(self):
        with pytest.raises(KeyConflictError) as exc_info:
            unflatten([("a", "leaf"), ("a.b", "child")])
        assert exc_info.value.key == "a.b"
        assert exc_info.value.conflicting_key == "a"

    def test_conflict_is_detected_regardless_of_order(self):
        with pytest.raises(KeyConflictError):
            unflatten([("a.b", "child"), ("a", "leaf")])


class TestFindConflicts:
    """Conflict detection for keys about to be added."""

    def test_prefix_and_extension_conflict(self):
        existing = ["a", "b.c", "b.cd", "x.y.z"]
        assert find_conflicts("a.b", existing) == ["a"]
        assert find_conflicts("b", existing) == ["b.c", "b.cd"]
        assert find_conflicts("x.y", existing) == ["x.y.z"]

    def test_similar_names_do_not_conflict(self):
        assert find_conflicts("b.c", ["b.cd", "b.c"]) == []
