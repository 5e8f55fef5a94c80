"""Error handling implementation for the Content Visualizer."""

import logging
from typing import Optional
from .types import (
    ErrorHandlerInterface,
    ValidationResult,
    ValidationError,
    ErrorResponse,
    ProcessingError,
    ErrorType
)
from .models import TableRow, TreeNode
from .utils.validation import ValidationUtils


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for content processing operations.

    Validates input and turns parse or conversion failures into the
    fail-soft values the tree and table builders hand back: a single
    ``Error`` node or row carrying a readable message.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, text: str) -> ValidationResult:
        """
        Validate input content.

        Args:
            text: Content to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            return ValidationUtils.validate_content(text)
        except (TypeError, AttributeError) as e:
            self.logger.error(f"Unexpected error during input validation: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.SYNTAX,
                    message=f"Validation failed with unexpected error: {str(e)}",
                    location="input"
                )],
                warnings=[]
            )

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Handle processing errors and provide recovery suggestions.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.warning(f"Processing error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.SYNTAX:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Content does not parse as the selected format. "
                                 "Try the raw view or select another format.",
                partial_results=error.context
            )
        elif error.error_type in (ErrorType.ENCODING, ErrorType.COMPRESSION):
            return ErrorResponse(
                can_recover=True,
                suggested_action="Content could not be decoded. It may be wrapped in another "
                                 "encoding; decode the outer layer first.",
                partial_results=error.context
            )
        elif error.error_type == ErrorType.UNSUPPORTED:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Pick one of the views listed for this format.",
                partial_results=None
            )
        elif error.error_type == ErrorType.SIZE:
            return ErrorResponse(
                can_recover=True,
                suggested_action="Content is very large. Use the raw or hex view.",
                partial_results=error.context
            )
        else:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Unknown error type. Please check logs and retry.",
                partial_results=None
            )

    def error_row(self, error: Exception, kind_name: str = "content") -> TableRow:
        """
        Build the single error row returned by a failed table builder.

        Args:
            error: The failure that stopped the builder
            kind_name: Human readable name of the format being parsed

        Returns:
            TableRow flagged as an error
        """
        message = self.describe(error)
        self.logger.warning(f"Could not build table for {kind_name}: {message}")
        return TableRow.error(message)

    def error_node(self, error: Exception, kind_name: str = "content") -> TreeNode:
        """
        Build the single error node returned by a failed tree builder.

        Args:
            error: The failure that stopped the builder
            kind_name: Human readable name of the format being parsed

        Returns:
            Leaf TreeNode keyed ``Error``
        """
        message = self.describe(error)
        self.logger.warning(f"Could not build tree for {kind_name}: {message}")
        return TreeNode(key="Error", value=message)

    @staticmethod
    def describe(error: Exception) -> str:
        """Collapse an exception into a one-line message."""
        message = " ".join(str(error).split())
        return message or type(error).__name__
