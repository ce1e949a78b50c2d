"""Core type definitions for the JSON Workbench."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class _Undefined:
    """Marker for "no value", distinct from a parsed JSON ``null``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNDEFINED = _Undefined()

DEFAULT_ROOT_NAME = "Root"

DEFAULT_JSON_INPUT = """{
  "users": [
    {"id": 1, "name": "Alice", "role": "admin", "active": true, "score": 92.5},
    {"id": 2, "name": "Bob", "role": "editor", "active": false, "score": 78},
    {"id": 3, "name": "Carol", "role": "viewer", "active": true, "score": 85}
  ],
  "meta": {"total": 3, "page": 1}
}"""

DEFAULT_TRANSFORM_SCRIPT = """# `data` is the parsed input, `_` is pydash.
return data
"""


class ConsoleLevel(Enum):
    """Enumeration of console levels a transform can write to."""
    LOG = "log"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class ErrorType(Enum):
    """Enumeration of error types."""
    JSON_PARSE = "json_parse"
    SCRIPT_EXECUTION = "script_execution"
    SHARE_DECODE = "share_decode"
    NETWORK_FETCH = "network_fetch"
    REENTRANT = "reentrant"
    NO_EVENT_LOOP = "no_event_loop"


@dataclass
class ExecutionResult:
    """Result of a sandboxed transform run."""
    success: bool
    value: Any = UNDEFINED
    error: Optional[str] = None


@dataclass(frozen=True)
class ConsoleEntry:
    """One console call made by a transform script."""
    level: ConsoleLevel
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot taken right before a transform is applied."""
    json_input: str
    transformed_json: Any = UNDEFINED


@dataclass
class WorkbenchState:
    """Editable workbench state plus everything derived from it."""
    json_input: str = ""
    json_parse_error: Optional[str] = None
    transform_script: str = ""
    transform_error: Optional[str] = None
    parsed_json: Any = UNDEFINED
    transformed_json: Any = UNDEFINED
    history: List[HistoryEntry] = field(default_factory=list)
    auto_run_enabled: bool = False
    console_logs: List[ConsoleEntry] = field(default_factory=list)
    root_name: str = DEFAULT_ROOT_NAME


@dataclass
class SharePayload:
    """Editable state carried by a share token."""
    json_input: Optional[str] = None
    transform_script: Optional[str] = None
    root_name: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Convert to the compact ``{j?, t?, r?}`` wire layout; absent fields are omitted."""
        data = {}
        if self.json_input is not None:
            data["j"] = self.json_input
        if self.transform_script is not None:
            data["t"] = self.transform_script
        if self.root_name and self.root_name != DEFAULT_ROOT_NAME:
            data["r"] = self.root_name
        return data

    @classmethod
    def from_dict(cls, data: Any) -> 'SharePayload':
        """
        Create a payload from the decoded ``{j, t, r}`` object.

        Raises:
            ValueError: If the object does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Share payload must be an object, got {type(data).__name__}")

        values = {}
        for key in ("j", "t", "r"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Share payload field '{key}' must be a string")
            values[key] = value

        return cls(json_input=values["j"], transform_script=values["t"], root_name=values["r"])

    def has_content(self) -> bool:
        """Check whether the payload carries input or script text."""
        return bool(self.json_input) or bool(self.transform_script)


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


class WorkbenchError(Exception):
    """Custom exception for workbench errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


# Abstract base classes for interfaces

class SandboxExecutorInterface(ABC):
    """Abstract interface for running transform scripts."""

    @abstractmethod
    def execute(self, script: str, data: Any, library: Any = None,
                console: Any = None) -> ExecutionResult:
        """Run a transform script body against data."""
        pass


class ShareCodecInterface(ABC):
    """Abstract interface for share token codecs."""

    @abstractmethod
    async def encode(self, payload: SharePayload) -> str:
        """Encode editable state into a share token."""
        pass

    @abstractmethod
    async def decode(self, token: str) -> Optional[SharePayload]:
        """Decode a share token, returning None when it is unusable."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_input(self, input_data: str) -> ValidationResult:
        """Validate input data."""
        pass

    @abstractmethod
    def handle_error(self, error: WorkbenchError) -> ErrorResponse:
        """Handle workbench errors."""
        pass
