"""Validation utilities for JSON text, transform results and share payloads."""

import json
import math
from typing import Any, FrozenSet
from ..types import ValidationResult, ValidationError, ErrorType, SharePayload

TOO_DEEP_MESSAGE = "nested too deeply to parse"


def _rejected(error_type: ErrorType, message: str, location: str) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        errors=[ValidationError(type=error_type, message=message, location=location)],
        warnings=[]
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


class ValidationUtils:
    """Utility class for validating workbench inputs and outputs."""

    MAX_DEPTH_WARNING = 20

    @staticmethod
    def loads(text: Any) -> Any:
        """
        Parse strict JSON.

        ``NaN``, ``Infinity`` and ``-Infinity`` are rejected.

        Raises:
            ValueError: If the text is not JSON
            RecursionError: If the text is nested too deeply to parse
        """
        return json.loads(text, parse_constant=_reject_constant)

    @staticmethod
    def validate_json_string(json_string: str) -> ValidationResult:
        """
        Check that text is a single JSON document.

        Args:
            json_string: Text typed into the input field

        Returns:
            ValidationResult; a syntax error carries its line and column as
            the location, deep nesting only adds a warning
        """
        if not json_string.strip():
            return _rejected(ErrorType.JSON_PARSE, "JSON input is empty", "input")

        try:
            data = ValidationUtils.loads(json_string)
        except json.JSONDecodeError as e:
            return _rejected(ErrorType.JSON_PARSE, f"Invalid JSON: {e.msg}",
                             f"line {e.lineno}, column {e.colno}")
        except ValueError as e:
            return _rejected(ErrorType.JSON_PARSE, f"Invalid JSON: {e}", "input")
        except RecursionError:
            return _rejected(ErrorType.JSON_PARSE, f"Invalid JSON: input is {TOO_DEEP_MESSAGE}", "input")

        result = ValidationResult(is_valid=True, errors=[], warnings=[])
        depth = ValidationUtils.nesting_depth(data)
        if depth > ValidationUtils.MAX_DEPTH_WARNING:
            result.warnings.append(f"Input is nested {depth} levels deep; views may be slow to render.")
        return result

    @staticmethod
    def validate_json_value(data: Any) -> ValidationResult:
        """
        Check that a transform result is plain JSON.

        Cycles are reported separately from other unserializable values
        (sets, arbitrary objects, NaN and infinities).
        """
        try:
            if ValidationUtils._contains_cycle(data):
                return _rejected(ErrorType.SCRIPT_EXECUTION,
                                 "Transform result contains circular references", "result")
            json.dumps(data, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            return _rejected(ErrorType.SCRIPT_EXECUTION,
                             f"Transform result is not JSON serializable: {e}", "result")
        except RecursionError:
            return _rejected(ErrorType.SCRIPT_EXECUTION,
                             "Transform result is nested too deeply to serialize", "result")

        return ValidationResult(is_valid=True, errors=[], warnings=[])

    @staticmethod
    def validate_share_payload(payload: SharePayload) -> ValidationResult:
        """A shared payload is usable only if its JSON input, when present, parses."""
        if payload.json_input:
            try:
                ValidationUtils.loads(payload.json_input)
            except json.JSONDecodeError as e:
                return _rejected(ErrorType.SHARE_DECODE, f"Shared JSON input is invalid: {e.msg}", "j")
            except ValueError as e:
                return _rejected(ErrorType.SHARE_DECODE, f"Shared JSON input is invalid: {e}", "j")
            except RecursionError:
                return _rejected(ErrorType.SHARE_DECODE, f"Shared JSON input is {TOO_DEEP_MESSAGE}", "j")

        return ValidationResult(is_valid=True, errors=[], warnings=[])

    @staticmethod
    def is_json_number(value: Any) -> bool:
        """Check for int/float values, excluding bools and non-finite floats."""
        if isinstance(value, bool):
            return False
        if isinstance(value, float):
            return math.isfinite(value)
        return isinstance(value, int)

    @staticmethod
    def nesting_depth(data: Any) -> int:
        """Containers on the deepest path from the root; 0 for a scalar."""
        deepest = 0
        pending = [(data, 1)]
        while pending:
            node, level = pending.pop()
            if isinstance(node, dict):
                children = node.values()
            elif isinstance(node, list):
                children = node
            else:
                continue
            deepest = max(deepest, level)
            pending.extend((child, level + 1) for child in children)
        return deepest

    @staticmethod
    def _contains_cycle(node: Any, ancestors: FrozenSet[int] = frozenset()) -> bool:
        # Only containers on the current path count; shared siblings are fine.
        if not isinstance(node, (dict, list)):
            return False
        if id(node) in ancestors:
            return True
        path = ancestors | {id(node)}
        children = node.values() if isinstance(node, dict) else node
        return any(ValidationUtils._contains_cycle(child, path) for child in children)
