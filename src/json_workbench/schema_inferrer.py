"""JSON Schema (draft-07) inference for arbitrary JSON values."""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence
from .types import DEFAULT_ROOT_NAME, UNDEFINED
from .utils.shape_utils import ShapeUtils

SCHEMA_DRAFT_07 = "http://json-schema.org/draft-07/schema#"


class SchemaInferrer:
    """
    Infers a JSON Schema describing a sample JSON value.

    Arrays of objects are described by the merged shape of all their
    object elements, so keys missing from some elements still appear
    (but are not required).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the schema inferrer.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def infer(self, value: Any) -> Dict[str, Any]:
        """
        Infer the schema of a single value.

        Args:
            value: JSON value to describe

        Returns:
            Schema dictionary
        """
        if value is UNDEFINED:
            return {}
        if value is None:
            return {"type": "null"}
        if isinstance(value, bool):
            return {"type": "boolean"}
        if isinstance(value, int):
            return {"type": "integer"}
        if isinstance(value, float):
            return {"type": "integer"} if value.is_integer() else {"type": "number"}
        if isinstance(value, str):
            return {"type": "string"}
        if isinstance(value, list):
            return self._infer_array(value)
        if isinstance(value, dict):
            return self._infer_object(value)

        self.logger.debug(f"No schema for non-JSON value of type {type(value).__name__}")
        return {}

    def to_json_schema(self, value: Any, root_name: str = DEFAULT_ROOT_NAME) -> Dict[str, Any]:
        """
        Infer a top-level schema document.

        Args:
            value: JSON value to describe
            root_name: Title of the schema

        Returns:
            Schema dictionary carrying ``$schema`` and ``title``
        """
        schema = {"$schema": SCHEMA_DRAFT_07, "title": root_name}
        schema.update(self.infer(value))
        return schema

    def to_json_schema_text(self, value: Any, root_name: str = DEFAULT_ROOT_NAME) -> str:
        """Schema document as 2-space indented JSON text."""
        return json.dumps(self.to_json_schema(value, root_name), indent=2, ensure_ascii=False)

    def _infer_array(self, value: List[Any]) -> Dict[str, Any]:
        if not value:
            return {"type": "array", "items": {}}

        first = value[0]
        if isinstance(first, dict):
            samples = [item for item in value if isinstance(item, dict)]
            merged = ShapeUtils.merge_shapes(samples)
            required = self._keys_required_by_all(samples)
            return {"type": "array", "items": self._infer_object(merged, required)}

        return {"type": "array", "items": self.infer(first)}

    def _infer_object(self, obj: Dict[str, Any],
                      required_keys: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        properties = {}
        required = []

        for key, val in obj.items():
            properties[key] = self.infer(val)
            if val is not None and val is not UNDEFINED:
                if required_keys is None or key in required_keys:
                    required.append(key)

        schema: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    @staticmethod
    def _keys_required_by_all(samples: Sequence[Dict[str, Any]]) -> List[str]:
        """Keys present with a non-null value in every sample."""
        if not samples:
            return []
        required = [key for key, val in samples[0].items() if val is not None]
        for sample in samples[1:]:
            required = [key for key in required if sample.get(key) is not None]
        return required
