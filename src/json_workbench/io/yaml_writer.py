"""Deterministic YAML rendering of JSON values."""

import logging
import re
from typing import Any, List, Optional
from ..types import UNDEFINED
from ..utils.shape_utils import format_number

NUMERIC_START_RE = re.compile(r"^[0-9.+-]")
SAFE_KEY_RE = re.compile(r"^[\w.-]+$", re.ASCII)
RESERVED_WORDS = frozenset({"true", "false", "null", "yes", "no"})
INDENT = "  "


class YamlWriter:
    """
    Writes JSON values as block-style YAML.

    Output is stable for a given value: keys keep their insertion order and
    quoting follows fixed rules rather than a full YAML emitter's heuristics.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the YAML writer.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def dumps(self, value: Any) -> str:
        """
        Render a JSON value as YAML text.

        Args:
            value: JSON value to render

        Returns:
            YAML text without a trailing newline
        """
        return "\n".join(self._render(value))

    @staticmethod
    def quote_string(text: str) -> str:
        """Quote a string scalar when it would otherwise be read as something else."""
        if (
            text == ""
            or text in RESERVED_WORDS
            or NUMERIC_START_RE.match(text)
            or any(ch in text for ch in (':', '#', '\n', '"', "'"))
            or text.startswith(' ')
            or text.endswith(' ')
        ):
            return YamlWriter._double_quote(text)
        return text

    @staticmethod
    def quote_key(key: str) -> str:
        """Quote a mapping key unless it is made of word characters, dots and dashes."""
        if SAFE_KEY_RE.match(key):
            return key
        return YamlWriter._double_quote(key)

    @staticmethod
    def _double_quote(text: str) -> str:
        escaped = text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
        return f'"{escaped}"'

    def _scalar(self, value: Any) -> str:
        if value is None or value is UNDEFINED:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return format_number(value)
        if isinstance(value, str):
            return self.quote_string(value)

        self.logger.debug(f"Rendering non-JSON value of type {type(value).__name__} as text")
        return self.quote_string(str(value))

    def _render(self, value: Any) -> List[str]:
        """Render a value as lines with no leading indentation."""
        if isinstance(value, dict):
            if not value:
                return ["{}"]
            lines = []
            for key, val in value.items():
                key_text = self.quote_key(str(key))
                if isinstance(val, (dict, list)) and val:
                    lines.append(f"{key_text}:")
                    lines.extend(INDENT + line for line in self._render(val))
                else:
                    lines.append(f"{key_text}: {self._render(val)[0]}")
            return lines

        if isinstance(value, list):
            if not value:
                return ["[]"]
            lines = []
            for item in value:
                rendered = self._render(item)
                lines.append(f"- {rendered[0]}")
                lines.extend(INDENT + line for line in rendered[1:])
            return lines

        return [self._scalar(value)]
