"""
JSON Workbench - transform JSON with small Python scripts.

Runs user transforms in a sandbox, keeps a revertible history of applied
transforms, packs the editable state into share links and derives
structural summaries (schema, YAML, array paths, columns) for views.
"""

from .history_store import HistoryStore
from .sandbox import SandboxExecutor, ConsoleCapture
from .scheduler import AutoRunScheduler
from .fetch import FetchImporter, FetchRequest, parse_curl_command
from .schema_inferrer import SchemaInferrer
from .io import ShareCodec, YamlWriter
from .utils import ShapeUtils
from .types import (
    ExecutionResult,
    ConsoleEntry,
    ConsoleLevel,
    HistoryEntry,
    SharePayload,
    WorkbenchState,
    WorkbenchError,
    ErrorType,
    UNDEFINED,
)

__version__ = "1.0.0"
__all__ = [
    "HistoryStore",
    "SandboxExecutor",
    "ConsoleCapture",
    "AutoRunScheduler",
    "FetchImporter",
    "FetchRequest",
    "parse_curl_command",
    "SchemaInferrer",
    "ShareCodec",
    "YamlWriter",
    "ShapeUtils",
    "ExecutionResult",
    "ConsoleEntry",
    "ConsoleLevel",
    "HistoryEntry",
    "SharePayload",
    "WorkbenchState",
    "WorkbenchError",
    "ErrorType",
    "UNDEFINED",
]
