"""Tests for path helpers."""

import pytest
from json_workbench.utils.paths import (
    escape_path_segment,
    join_key,
    join_index,
    split_path,
    describe_path,
    get_value_by_path,
)
from json_workbench.types import UNDEFINED


class TestPaths:
    """Tests for path building, splitting and lookup."""

    def test_join(self):
        """Test building paths from keys and indices."""
        assert join_key("", "users") == "users"
        assert join_index("users", 0) == "users[0]"
        assert join_key("users[0]", "tags") == "users[0].tags"
        assert join_index("", 2) == "[2]"

    def test_escape_special_characters(self):
        """Test that separators inside keys are escaped."""
        assert escape_path_segment("a.b") == "a\\.b"
        assert escape_path_segment("x[0]") == "x\\[0]"
        assert escape_path_segment("back\\slash") == "back\\\\slash"

    @pytest.mark.parametrize("path,expected", [
        ("", []),
        ("users", ["users"]),
        ("users[0].address.city", ["users", 0, "address", "city"]),
        ("[1][2]", [1, 2]),
        ("matrix[0][1]", ["matrix", 0, 1]),
        ("a\\.b.c", ["a.b", "c"]),
    ])
    def test_split_path(self, path, expected):
        """Test splitting paths into segments."""
        assert split_path(path) == expected

    def test_split_round_trips_escaped_key(self):
        """Test that keys with separators survive join and split."""
        path = join_index(join_key("", "weird.key[x]"), 3)
        assert split_path(path) == ["weird.key[x]", 3]

    @pytest.mark.parametrize("path", ["items[", "items[a]"])
    def test_split_path_invalid(self, path):
        """Test malformed indices."""
        with pytest.raises(ValueError):
            split_path(path)

    def test_describe_path(self):
        """Test human-readable labels."""
        assert describe_path("") == "(root)"
        assert describe_path("data.items[0].tags") == "data > items[0] > tags"
        assert describe_path("[0]") == "[0]"

    def test_get_value_by_path(self, sample_nested_json):
        """Test lookup by path."""
        assert get_value_by_path(sample_nested_json, "orders[0].items[1].sku") == "b"
        assert get_value_by_path(sample_nested_json, "owner.emails") == ["d@example.com"]
        assert get_value_by_path(sample_nested_json, "") is sample_nested_json

    def test_get_value_by_path_missing(self, sample_nested_json):
        """Test that missing steps yield UNDEFINED."""
        assert get_value_by_path(sample_nested_json, "orders[5]") is UNDEFINED
        assert get_value_by_path(sample_nested_json, "owner.phone") is UNDEFINED
        assert get_value_by_path(sample_nested_json, "tags.name") is UNDEFINED
        assert get_value_by_path(sample_nested_json, "orders[") is UNDEFINED

    def test_get_value_by_path_null_value(self):
        """Test that a stored null is returned as None."""
        assert get_value_by_path({"a": None}, "a") is None
