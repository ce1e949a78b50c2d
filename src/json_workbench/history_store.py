"""Workbench state machine with a revertible history of transforms."""

import copy
import json
import logging
from contextlib import contextmanager
from typing import Any, Optional
from .types import (
    WorkbenchState,
    HistoryEntry,
    ExecutionResult,
    SharePayload,
    SandboxExecutorInterface,
    WorkbenchError,
    ErrorType,
    UNDEFINED,
    DEFAULT_JSON_INPUT,
    DEFAULT_TRANSFORM_SCRIPT,
    DEFAULT_ROOT_NAME
)
from .error_handler import ErrorHandler
from .parser import JSONParser
from .profiler import ExecutionProfiler
from .sandbox import SandboxExecutor, ConsoleCapture


class HistoryStore:
    """
    Owns the WorkbenchState and every operation that mutates it.

    ``execute_transform`` runs the current script against the parsed input
    and, only when the run succeeds, records the input and transformed value
    it replaced; ``revert`` restores the most recent record.
    Operations are not reentrant: calling one while a transform is running
    raises a WorkbenchError.
    """

    def __init__(self, executor: Optional[SandboxExecutorInterface] = None,
                 library: Any = None,
                 error_handler: Optional[ErrorHandler] = None,
                 profiler: Optional[ExecutionProfiler] = None,
                 logger: Optional[logging.Logger] = None,
                 json_input: str = DEFAULT_JSON_INPUT,
                 transform_script: str = DEFAULT_TRANSFORM_SCRIPT,
                 root_name: str = DEFAULT_ROOT_NAME,
                 auto_run: bool = False):
        """
        Initialize the history store.

        Args:
            executor: Sandbox used to run transforms
            library: Utility library bound to ``_`` (defaults to pydash)
            error_handler: Optional ErrorHandler instance
            profiler: Optional ExecutionProfiler timing each run
            logger: Optional logger instance
            json_input: Initial JSON input text
            transform_script: Initial transform script
            root_name: Initial root name
            auto_run: Whether auto-run starts enabled
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self.parser = JSONParser(self.error_handler, self.logger)
        self.executor = executor or SandboxExecutor(self.error_handler, self.logger)
        self.library = library
        self.profiler = profiler or ExecutionProfiler(self.logger)

        self._defaults = (json_input, transform_script, root_name)
        self._running = False
        self.state = WorkbenchState(
            transform_script=transform_script,
            auto_run_enabled=auto_run,
            root_name=root_name
        )
        self._apply_json_input(json_input)

    @property
    def running(self) -> bool:
        """Whether a transform is currently executing."""
        return self._running

    @property
    def can_revert(self) -> bool:
        """Whether there is a transform to revert."""
        return len(self.state.history) > 0

    def set_json_input(self, text: str) -> None:
        """
        Replace the JSON input text and re-parse it.

        A parse failure sets ``json_parse_error`` and clears ``parsed_json``;
        the transformed value and history are left alone.
        """
        self._ensure_idle("set_json_input")
        self._apply_json_input(text)

    def set_transform_script(self, text: str) -> None:
        """Replace the transform script. Does not run it."""
        self._ensure_idle("set_transform_script")
        self.state.transform_script = text

    def set_root_name(self, name: str) -> None:
        """Set the root name used as the schema title and in share tokens."""
        self._ensure_idle("set_root_name")
        self.state.root_name = name or DEFAULT_ROOT_NAME

    def set_auto_run(self, enabled: bool) -> None:
        """Enable or disable auto-run (scheduling lives in AutoRunScheduler)."""
        self.state.auto_run_enabled = enabled

    def format_json_input(self, indent: int = 2) -> bool:
        """Pretty-print the JSON input in place; no-op when it does not parse."""
        formatted = self.parser.format(self.state.json_input, indent)
        if formatted is None:
            return False
        self.set_json_input(formatted)
        return True

    def minify_json_input(self) -> bool:
        """Compact the JSON input in place; no-op when it does not parse."""
        minified = self.parser.minify(self.state.json_input)
        if minified is None:
            return False
        self.set_json_input(minified)
        return True

    def execute_transform(self) -> Optional[ExecutionResult]:
        """
        Apply the transform script to the parsed input.

        Returns:
            ExecutionResult of the run, or None when the input does not parse
        """
        self._ensure_idle("execute_transform")
        state = self.state

        if state.json_parse_error is not None:
            self.logger.info(f"Not running transform, input is invalid: {state.json_parse_error}")
            return None

        entry = HistoryEntry(
            json_input=state.json_input,
            transformed_json=copy.deepcopy(state.transformed_json)
        )
        console = ConsoleCapture(state.console_logs)

        with self._running_guard(), self.profiler.profile_operation(
                "execute_transform", len(state.json_input.encode('utf-8'))) as profile:
            result = self.executor.execute(state.transform_script, state.parsed_json,
                                           self.library, console)
            profile.sample()
            profile.succeeded = result.success
            if result.success and result.value is not UNDEFINED:
                profile.output_size = len(json.dumps(result.value, ensure_ascii=False).encode('utf-8'))

        if not result.success:
            state.transform_error = result.error
            self.logger.warning(f"Transform failed: {result.error}")
            return result

        state.history.append(entry)
        if result.value is UNDEFINED:
            state.transformed_json = copy.deepcopy(state.parsed_json)
        else:
            state.transformed_json = result.value
        state.transform_error = None

        self.logger.info(f"Transform applied (history depth {len(state.history)})")
        return result

    def revert(self) -> bool:
        """
        Undo the most recent transform run.

        Returns:
            True if a history entry was restored, False if history was empty
        """
        self._ensure_idle("revert")
        if not self.state.history:
            return False

        entry = self.state.history.pop()
        self._apply_json_input(entry.json_input)
        self.state.transformed_json = copy.deepcopy(entry.transformed_json)
        self.state.transform_error = None

        self.logger.info(f"Reverted transform (history depth {len(self.state.history)})")
        return True

    def reset(self) -> None:
        """Return the workbench to its initial defaults."""
        self._ensure_idle("reset")
        json_input, transform_script, root_name = self._defaults
        auto_run = self.state.auto_run_enabled

        self.state = WorkbenchState(
            transform_script=transform_script,
            auto_run_enabled=auto_run,
            root_name=root_name
        )
        self._apply_json_input(json_input)
        self.logger.info("Workbench reset")

    def clear_console_logs(self) -> None:
        """Empty the console log only."""
        self.state.console_logs.clear()

    def snapshot(self) -> SharePayload:
        """Editable state as a share payload."""
        return SharePayload(
            json_input=self.state.json_input,
            transform_script=self.state.transform_script,
            root_name=self.state.root_name
        )

    def apply_share_payload(self, payload: SharePayload) -> bool:
        """
        Load the fields carried by a share payload.

        Returns:
            True if the payload carried JSON input or a script
        """
        self._ensure_idle("apply_share_payload")
        if not payload.has_content():
            return False

        if payload.json_input:
            self._apply_json_input(payload.json_input)
        if payload.transform_script:
            self.state.transform_script = payload.transform_script
        if payload.root_name:
            self.state.root_name = payload.root_name

        self.logger.info("Loaded shared workbench state")
        return True

    def transformed_as_text(self, indent: int = 2) -> Optional[str]:
        """The transformed value as JSON text, or None if there is none yet."""
        if self.state.transformed_json is UNDEFINED:
            return None
        return json.dumps(self.state.transformed_json, indent=indent, ensure_ascii=False)

    def _apply_json_input(self, text: str) -> None:
        self.state.json_input = text
        parsed, error = self.parser.try_parse(text)
        self.state.parsed_json = parsed
        self.state.json_parse_error = error

    def _ensure_idle(self, operation: str) -> None:
        if self._running:
            raise WorkbenchError(
                f"Cannot {operation} while a transform is running",
                ErrorType.REENTRANT
            )

    @contextmanager
    def _running_guard(self):
        self._running = True
        try:
            yield
        finally:
            self._running = False
