"""Shape, path and column utilities feeding the table and chart views."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from ..types import UNDEFINED
from .paths import describe_path, get_value_by_path, join_index, join_key
from .validation import ValidationUtils


@dataclass
class ArrayPath:
    """An array discovered inside a JSON value."""
    path: str
    label: str
    length: int


def format_number(value: Any) -> str:
    """Render a number the way JSON text would, without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value)


class ShapeUtils:
    """Stateless helpers computing structural summaries of JSON values."""

    @staticmethod
    def merge_shapes(values: Sequence[Any]) -> Dict[str, Any]:
        """
        Merge object samples into a single representative object.

        Keys are the union of all sampled keys in first-seen order. For a key
        seen more than once the first non-null value wins; objects found
        under the same key are merged recursively.

        Args:
            values: Object samples, typically the elements of an array

        Returns:
            Merged object
        """
        merged: Dict[str, Any] = {}

        for sample in values:
            if not isinstance(sample, dict):
                continue
            for key, value in sample.items():
                if key not in merged or merged[key] is None:
                    merged[key] = value
                elif isinstance(merged[key], dict) and isinstance(value, dict):
                    merged[key] = ShapeUtils.merge_shapes([merged[key], value])

        return merged

    @staticmethod
    def get_columns(rows: Sequence[Any]) -> List[str]:
        """Union of keys across object rows, first-seen order."""
        columns: Dict[str, None] = {}
        for row in rows:
            if isinstance(row, dict):
                for key in row:
                    columns.setdefault(key, None)
        return list(columns)

    @staticmethod
    def find_array_paths(data: Any) -> List[ArrayPath]:
        """
        Find every array reachable from the root, depth first.

        Args:
            data: JSON value to traverse

        Returns:
            List of ArrayPath in pre-order
        """
        found: List[ArrayPath] = []
        ShapeUtils._collect_array_paths(data, "", found)
        return found

    @staticmethod
    def _collect_array_paths(data: Any, path: str, found: List[ArrayPath]) -> None:
        if isinstance(data, list):
            found.append(ArrayPath(path=path, label=describe_path(path), length=len(data)))
            for index, item in enumerate(data):
                if isinstance(item, (dict, list)):
                    ShapeUtils._collect_array_paths(item, join_index(path, index), found)
        elif isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, (dict, list)):
                    ShapeUtils._collect_array_paths(value, join_key(path, key), found)

    @staticmethod
    def get_value_at_path(data: Any, path: Optional[str]) -> Any:
        """Value at a path produced by find_array_paths; UNDEFINED if missing."""
        if not path:
            return data
        return get_value_by_path(data, path)

    @staticmethod
    def numeric_columns(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> List[str]:
        """Columns holding a number in at least one row."""
        return [
            col for col in columns
            if any(ValidationUtils.is_json_number(row.get(col)) for row in rows)
        ]

    @staticmethod
    def label_columns(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> List[str]:
        """Columns holding a string or a number in at least one row."""
        return [
            col for col in columns
            if any(
                isinstance(row.get(col), str) or ValidationUtils.is_json_number(row.get(col))
                for row in rows
            )
        ]

    @staticmethod
    def tabulate(data: Any, path: Optional[str] = None) -> Tuple[List[Dict[str, Any]], List[str]]:
        """
        Project a JSON value into table rows and columns.

        Uses the array at ``path``, or the first array found when no path is
        given. Only arrays whose first element is an object tabulate.

        Returns:
            Tuple of (rows, columns); both empty when nothing tabulates
        """
        if path is None:
            array_paths = ShapeUtils.find_array_paths(data)
            path = array_paths[0].path if array_paths else None

        active = ShapeUtils.get_value_at_path(data, path)
        if not isinstance(active, list) or not active or not isinstance(active[0], dict):
            return [], []

        rows = [row for row in active if isinstance(row, dict)]
        return rows, ShapeUtils.get_columns(rows)

    @staticmethod
    def chart_rows(rows: Sequence[Dict[str, Any]], x_axis: str,
                   y_axes: Sequence[str]) -> List[Dict[str, Any]]:
        """Reduce rows to the x value plus numeric y values (0 when not numeric)."""
        chart_data = []
        for row in rows:
            entry = {x_axis: row.get(x_axis)}
            for y in y_axes:
                value = row.get(y)
                entry[y] = value if ValidationUtils.is_json_number(value) else 0
            chart_data.append(entry)
        return chart_data

    @staticmethod
    def format_cell(value: Any) -> str:
        """Render a single table cell."""
        if value is UNDEFINED:
            return ""
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return format_number(value)
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
