"""Tests for validation utilities."""

import pytest
from json_workbench.utils.validation import ValidationUtils
from json_workbench.types import ErrorType, SharePayload


class TestValidationUtils:
    """Tests for ValidationUtils class."""

    def test_validate_json_string_valid(self):
        """Test validation of valid JSON string."""
        result = ValidationUtils.validate_json_string('{"name": "Alice", "age": 30}')

        assert result.is_valid
        assert len(result.errors) == 0

    def test_validate_json_string_invalid(self):
        """Test validation of invalid JSON string."""
        result = ValidationUtils.validate_json_string('{"name": "Alice", "age": 30')

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.JSON_PARSE
        assert result.errors[0].location.startswith("line 1, column")

    def test_validate_json_string_empty(self):
        """Test validation of empty JSON string."""
        result = ValidationUtils.validate_json_string("")

        assert not result.is_valid
        assert result.errors[0].message == "JSON input is empty"

    def test_validate_json_string_deep_nesting(self):
        """Test that deep nesting produces a warning, not an error."""
        deep = "[" * 25 + "]" * 25
        result = ValidationUtils.validate_json_string(deep)

        assert result.is_valid
        assert result.warnings == ["Input is nested 25 levels deep; views may be slow to render."]

    @pytest.mark.parametrize("text", ["NaN", '{"a": Infinity}', "[-Infinity]"])
    def test_validate_json_string_non_finite(self, text):
        """Test that NaN and the infinities are rejected."""
        result = ValidationUtils.validate_json_string(text)

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.JSON_PARSE
        assert "not a valid JSON value" in result.errors[0].message

    def test_loads_rejects_non_finite(self):
        """Test that the strict loader raises on non-JSON constants."""
        with pytest.raises(ValueError, match="NaN"):
            ValidationUtils.loads("[NaN]")
        assert ValidationUtils.loads("[1.5e308]") == [1.5e308]

    def test_validate_json_string_too_deep(self):
        """Test that text too deep to parse is an error, not a crash."""
        result = ValidationUtils.validate_json_string("{\"a\":" * 100000 + "1" + "}" * 100000)

        assert not result.is_valid
        assert "nested too deeply" in result.errors[0].message

    def test_validate_share_payload_non_finite(self):
        """Test that shared input with NaN is rejected."""
        result = ValidationUtils.validate_share_payload(SharePayload('{"a": NaN}', "return data"))

        assert not result.is_valid
        assert result.errors[0].location == "j"

    def test_validate_json_value_plain(self, sample_users_json):
        """Test that plain JSON values pass."""
        assert ValidationUtils.validate_json_value(sample_users_json).is_valid
        assert ValidationUtils.validate_json_value(None).is_valid

    def test_validate_json_value_circular(self):
        """Test circular reference detection."""
        data = {"a": {}}
        data["a"]["self"] = data

        result = ValidationUtils.validate_json_value(data)

        assert not result.is_valid
        assert "circular" in result.errors[0].message

    def test_validate_json_value_shared_reference_is_fine(self):
        """Test that the same object appearing twice is not a cycle."""
        shared = {"x": 1}
        assert ValidationUtils.validate_json_value([shared, shared]).is_valid

    @pytest.mark.parametrize("value", [
        {"when": object()},
        [1, {2, 3}],
        float("nan"),
        {"x": float("inf")},
    ])
    def test_validate_json_value_not_serializable(self, value):
        """Test rejection of values with no JSON representation."""
        result = ValidationUtils.validate_json_value(value)

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.SCRIPT_EXECUTION

    def test_validate_share_payload(self):
        """Test share payload validation."""
        assert ValidationUtils.validate_share_payload(SharePayload('{"a": 1}', "return data")).is_valid
        assert ValidationUtils.validate_share_payload(SharePayload(None, "return data")).is_valid

        result = ValidationUtils.validate_share_payload(SharePayload("{oops", ""))
        assert not result.is_valid
        assert result.errors[0].location == "j"

    @pytest.mark.parametrize("value,expected", [
        (1, True),
        (2.5, True),
        (True, False),
        ("3", False),
        (None, False),
        (float("nan"), False),
    ])
    def test_is_json_number(self, value, expected):
        """Test numeric detection for column typing."""
        assert ValidationUtils.is_json_number(value) is expected
