"""Error handling implementation for the JSON Workbench."""

import logging
from typing import Optional
from .types import (
    ErrorHandlerInterface,
    ValidationResult,
    ValidationError,
    ErrorResponse,
    WorkbenchError,
    ErrorType
)
from .utils.validation import ValidationUtils

GENERIC_TRANSFORM_FAILURE = "Transform execution failed"


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for workbench operations.

    Turns the four recoverable error kinds (bad JSON input, failing
    transform scripts, corrupt share tokens and failed fetches) into
    messages and recovery suggestions. None of them is fatal.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, input_data: str) -> ValidationResult:
        """Validate the text of the JSON input field."""
        if not isinstance(input_data, str):
            self.logger.error(f"JSON input must be text, got {type(input_data).__name__}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.JSON_PARSE,
                    message=f"Expected JSON text, got {type(input_data).__name__}",
                    location="input"
                )],
                warnings=[]
            )
        return ValidationUtils.validate_json_string(input_data)

    def format_validation_errors(self, result: ValidationResult) -> Optional[str]:
        """
        Join validation errors into one user-facing message.

        Returns:
            The message, or None when the result is valid
        """
        if result.is_valid:
            return None
        parts = []
        for error in result.errors:
            if error.location and error.location != "input":
                parts.append(f"{error.message} ({error.location})")
            else:
                parts.append(error.message)
        return "; ".join(parts)

    def describe_exception(self, error: BaseException) -> str:
        """
        Map an exception raised by a transform to a message.

        Syntax errors carry their line number; other exceptions use their own
        message, falling back to a generic text when they have none.
        """
        if isinstance(error, SyntaxError):
            if error.lineno:
                return f"{error.msg} (line {error.lineno})"
            return error.msg or GENERIC_TRANSFORM_FAILURE

        message = str(error)
        if not message:
            return f"{type(error).__name__}: {GENERIC_TRANSFORM_FAILURE}"
        return message

    def handle_error(self, error: WorkbenchError) -> ErrorResponse:
        """
        Handle workbench errors and provide recovery suggestions.

        Args:
            error: WorkbenchError to handle

        Returns:
            ErrorResponse with recovery information
        """
        if error.error_type == ErrorType.SHARE_DECODE:
            self.logger.debug(f"Ignoring share data: {error}")
        else:
            self.logger.warning(f"Workbench error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.JSON_PARSE:
            return self._handle_json_parse_error(error)
        elif error.error_type == ErrorType.SCRIPT_EXECUTION:
            return self._handle_script_error(error)
        elif error.error_type == ErrorType.SHARE_DECODE:
            return self._handle_share_decode_error(error)
        elif error.error_type == ErrorType.NETWORK_FETCH:
            return self._handle_fetch_error(error)
        elif error.error_type == ErrorType.NO_EVENT_LOOP:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Enable auto-run from inside a running event loop, "
                                 "or pass the loop to the scheduler.",
                partial_results=None
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Wait for the running transform to finish before changing the workbench.",
                partial_results=None
            )

    def _handle_json_parse_error(self, error: WorkbenchError) -> ErrorResponse:
        """Handle malformed JSON input."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Fix the JSON input. The last transformed result is kept until it parses again.",
            partial_results=error.context.get('transformed_json') if error.context else None
        )

    def _handle_script_error(self, error: WorkbenchError) -> ErrorResponse:
        """Handle a failing transform script."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Fix the transform script and run it again. "
                           "The previous result is still shown.",
            partial_results=error.context.get('transformed_json') if error.context else None
        )

    def _handle_share_decode_error(self, error: WorkbenchError) -> ErrorResponse:
        """Handle a corrupt share token."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Ignore the share link and start from the current workbench state.",
            partial_results=None
        )

    def _handle_fetch_error(self, error: WorkbenchError) -> ErrorResponse:
        """Handle a failed fetch."""
        return ErrorResponse(
            can_recover=True,
            suggested_action="Check the URL, method, headers and body, then fetch again.",
            partial_results=error.context.get('status') if error.context else None
        )
