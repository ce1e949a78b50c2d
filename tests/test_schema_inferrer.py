"""Tests for JSON Schema inference."""

import json
import pytest
from json_workbench.schema_inferrer import SchemaInferrer, SCHEMA_DRAFT_07
from json_workbench.types import UNDEFINED


class TestSchemaInferrer:
    """Tests for SchemaInferrer class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.inferrer = SchemaInferrer()

    @pytest.mark.parametrize("value,expected", [
        (None, {"type": "null"}),
        (True, {"type": "boolean"}),
        (3, {"type": "integer"}),
        (4.0, {"type": "integer"}),
        (2.5, {"type": "number"}),
        ("s", {"type": "string"}),
        ([], {"type": "array", "items": {}}),
        (UNDEFINED, {}),
    ])
    def test_infer_scalars(self, value, expected):
        """Test inference of primitive and empty values."""
        assert self.inferrer.infer(value) == expected

    def test_infer_object(self):
        """Test that non-null keys are required."""
        schema = self.inferrer.infer({"id": 1, "note": None})

        assert schema == {
            "type": "object",
            "properties": {"id": {"type": "integer"}, "note": {"type": "null"}},
            "required": ["id"],
        }

    def test_infer_object_all_null_omits_required(self):
        """Test that required is left out when empty."""
        assert self.inferrer.infer({"a": None}) == {
            "type": "object",
            "properties": {"a": {"type": "null"}},
        }

    def test_infer_array_of_primitives_uses_first(self):
        """Test that primitive arrays are typed by their first element."""
        assert self.inferrer.infer(["a", 1]) == {"type": "array", "items": {"type": "string"}}

    def test_infer_array_of_objects_merges_shapes(self):
        """Test that keys from every element appear."""
        schema = self.inferrer.infer([{"a": 1}, {"b": "x"}])

        assert schema["items"]["properties"] == {
            "a": {"type": "integer"},
            "b": {"type": "string"},
        }
        assert "required" not in schema["items"]

    def test_infer_array_required_keys_present_in_all(self):
        """Test that keys present in every element are required."""
        schema = self.inferrer.infer([{"id": 1, "tag": None}, {"id": 2, "tag": "x"}])

        assert schema["items"]["properties"]["tag"] == {"type": "string"}
        assert schema["items"]["required"] == ["id"]

    def test_to_json_schema_header(self, sample_users_json):
        """Test the top-level document."""
        schema = self.inferrer.to_json_schema(sample_users_json, "Users")

        assert list(schema)[:2] == ["$schema", "title"]
        assert schema["$schema"] == SCHEMA_DRAFT_07
        assert schema["title"] == "Users"
        assert schema["type"] == "object"
        users = schema["properties"]["users"]
        assert users["items"]["properties"]["active"] == {"type": "boolean"}
        assert users["items"]["required"] == ["id", "name", "age", "active"]

    def test_to_json_schema_text(self):
        """Test the rendered text."""
        text = self.inferrer.to_json_schema_text(5)

        assert json.loads(text) == {"$schema": SCHEMA_DRAFT_07, "title": "Root", "type": "integer"}
        assert text.startswith('{\n  "$schema"')
