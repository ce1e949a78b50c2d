"""Sandboxed execution of user transform scripts."""

import ast
import builtins
import copy
import json
import logging
from typing import Any, Callable, Dict, List, Optional
import pydash
from .types import (
    SandboxExecutorInterface,
    ExecutionResult,
    ConsoleEntry,
    ConsoleLevel,
    UNDEFINED
)
from .error_handler import ErrorHandler
from .utils.validation import ValidationUtils

SCRIPT_FILENAME = "<transform>"
FUNCTION_NAME = "__transform__"

# Builtins a transform may use. Anything that reaches the filesystem, the
# import system or other code objects is left out.
SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "chr", "dict", "divmod", "enumerate",
    "filter", "float", "format", "frozenset", "hash", "int", "isinstance",
    "issubclass", "iter", "len", "list", "map", "max", "min", "next", "ord",
    "pow", "range", "repr", "reversed", "round", "set", "slice", "sorted",
    "str", "sum", "tuple", "type", "zip",
    "ArithmeticError", "AssertionError", "AttributeError", "Exception",
    "IndexError", "KeyError", "LookupError", "NotImplementedError",
    "RuntimeError", "StopIteration", "TypeError", "ValueError",
    "ZeroDivisionError",
)


class ConsoleCapture:
    """
    Console handed to a transform script.

    Every call is recorded as a ConsoleEntry, in call order, instead of
    reaching a real console.
    """

    def __init__(self, entries: Optional[List[ConsoleEntry]] = None):
        self.entries: List[ConsoleEntry] = entries if entries is not None else []

    def _record(self, level: ConsoleLevel, args: tuple) -> None:
        self.entries.append(ConsoleEntry(level=level, args=tuple(args)))

    def log(self, *args: Any) -> None:
        self._record(ConsoleLevel.LOG, args)

    def info(self, *args: Any) -> None:
        self._record(ConsoleLevel.INFO, args)

    def warn(self, *args: Any) -> None:
        self._record(ConsoleLevel.WARN, args)

    def error(self, *args: Any) -> None:
        self._record(ConsoleLevel.ERROR, args)

    def clear(self) -> None:
        self.entries.clear()


class SandboxExecutor(SandboxExecutorInterface):
    """
    Runs a transform script body against a JSON value.

    The body is compiled into ``def __transform__(_, data)`` and called once.
    Its globals hold a restricted builtin table, ``console`` and a ``print``
    routed to ``console.log``. This contains exceptions, it is not a security
    boundary: a script can still loop forever or exhaust memory.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the sandbox executor.

        Args:
            error_handler: Optional ErrorHandler used to describe failures
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self._safe_builtins = {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}

    def compile(self, script: str, console: ConsoleCapture) -> Callable[[Any, Any], Any]:
        """
        Compile a script body into a callable taking ``(_, data)``.

        Raises:
            SyntaxError: If the body is not valid Python
        """
        # The body's statements are grafted into the function node unchanged, so
        # string literals and line numbers stay as the user wrote them.
        module = ast.parse(f"def {FUNCTION_NAME}(_, data):\n    pass\n", SCRIPT_FILENAME)
        statements = ast.parse(script, SCRIPT_FILENAME).body
        if statements:
            module.body[0].body = statements
        code = compile(module, SCRIPT_FILENAME, "exec")

        scope: Dict[str, Any] = {
            "__builtins__": self._safe_builtins,
            "__name__": SCRIPT_FILENAME,
            "console": console,
            "print": console.log,
        }
        exec(code, scope)
        return scope[FUNCTION_NAME]

    def execute(self, script: str, data: Any, library: Any = None,
                console: Optional[ConsoleCapture] = None) -> ExecutionResult:
        """
        Run a transform script.

        Args:
            script: Python function body; may ``return`` a JSON value
            data: Input JSON value (the script receives a deep copy)
            library: Utility library bound to ``_`` (defaults to pydash)
            console: ConsoleCapture receiving console calls

        Returns:
            ExecutionResult; ``value`` is UNDEFINED when the script returned
            nothing
        """
        console = console if console is not None else ConsoleCapture()
        library = library if library is not None else pydash

        try:
            transform = self.compile(script, console)
            result = transform(library, copy.deepcopy(data))
        except Exception as e:
            message = self.error_handler.describe_exception(e)
            self.logger.debug(f"Transform raised {type(e).__name__}: {message}")
            return ExecutionResult(success=False, error=message)

        if result is None:
            return ExecutionResult(success=True, value=UNDEFINED)

        validation = ValidationUtils.validate_json_value(result)
        if not validation.is_valid:
            return ExecutionResult(
                success=False,
                error="; ".join(error.message for error in validation.errors)
            )

        # Round-trip through JSON so tuples, int keys and the like become plain JSON.
        return ExecutionResult(success=True, value=json.loads(json.dumps(result)))
