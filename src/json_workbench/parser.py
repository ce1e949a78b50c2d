"""JSON input parser with validation, formatting and structure statistics."""

import json
import logging
from typing import Any, Dict, Optional, Tuple
from .types import UNDEFINED
from .error_handler import ErrorHandler
from .utils.validation import ValidationUtils


class JSONParser:
    """
    JSON parser for the workbench input field.

    Parses input text into a JSON value, producing the sticky error message
    shown next to the input when the text is malformed.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, json_string: str) -> Any:
        """
        Parse JSON text.

        Any JSON value is accepted as the root, including primitives.

        Args:
            json_string: JSON string to parse

        Returns:
            Parsed data

        Raises:
            ValueError: If JSON is invalid
        """
        validation_result = self.error_handler.validate_input(json_string)
        if not validation_result.is_valid:
            raise ValueError(self.error_handler.format_validation_errors(validation_result))

        for warning in validation_result.warnings:
            self.logger.debug(warning)

        return ValidationUtils.loads(json_string)

    def try_parse(self, json_string: str) -> Tuple[Any, Optional[str]]:
        """
        Parse JSON text without raising.

        Returns:
            Tuple of (parsed_data, error_message); parsed_data is UNDEFINED
            when error_message is set
        """
        try:
            return self.parse(json_string), None
        except ValueError as e:
            return UNDEFINED, str(e)
        except RecursionError:
            return UNDEFINED, "Invalid JSON: input is nested too deeply to parse"

    def format(self, json_string: str, indent: int = 2) -> Optional[str]:
        """Pretty-print JSON text, or return None if it does not parse."""
        data, error = self.try_parse(json_string)
        if error is not None:
            return None
        return json.dumps(data, indent=indent, ensure_ascii=False)

    def minify(self, json_string: str) -> Optional[str]:
        """Compact JSON text, or return None if it does not parse."""
        data, error = self.try_parse(json_string)
        if error is not None:
            return None
        return json.dumps(data, separators=(',', ':'), ensure_ascii=False)

    def get_structure_statistics(self, data: Any) -> Dict[str, Any]:
        """
        Summarise the shape of a parsed value.

        Returns:
            Dictionary with ``size_bytes`` (compact UTF-8 JSON, -1 if the value
            is not serializable), ``depth``, ``objects``, ``arrays``,
            ``scalars``, ``keys`` and ``items``
        """
        stats = {"objects": 0, "arrays": 0, "scalars": 0, "keys": 0, "items": 0}

        pending = [data]
        while pending:
            node = pending.pop()
            if isinstance(node, dict):
                stats["objects"] += 1
                stats["keys"] += len(node)
                pending.extend(node.values())
            elif isinstance(node, list):
                stats["arrays"] += 1
                stats["items"] += len(node)
                pending.extend(node)
            else:
                stats["scalars"] += 1

        try:
            stats["size_bytes"] = len(json.dumps(data, ensure_ascii=False, separators=(',', ':')).encode('utf-8'))
        except (TypeError, ValueError):
            stats["size_bytes"] = -1
        stats["depth"] = ValidationUtils.nesting_depth(data)
        return stats