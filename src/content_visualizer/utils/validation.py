"""Validation utilities for content and view requests."""

from typing import Optional
from ..types import ValidationResult, ValidationError, ErrorType, FormatKind, ViewType
from ..views import get_profile


# Content above this size is processed, but the caller is warned
LARGE_CONTENT_BYTES = 10 * 1024 * 1024


class ValidationUtils:
    """Utility class for validating content and view requests."""

    @staticmethod
    def validate_content(text: Optional[str]) -> ValidationResult:
        """
        Validate raw content before processing.

        Args:
            text: Content to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if text is None or not text.strip():
            errors.append(ValidationError(
                type=ErrorType.SYNTAX,
                message="Content is empty",
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        size = len(text.encode("utf-8", errors="surrogatepass"))
        if size > LARGE_CONTENT_BYTES:
            warnings.append(f"Content is very large ({size / (1024 * 1024):.1f}MB). "
                            "Tree and table views may be slow.")

        if "\x00" in text:
            warnings.append("Content contains NUL characters and may be binary data. "
                            "Consider the hex view.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def validate_view(kind: Optional[FormatKind], view: ViewType) -> ValidationResult:
        """
        Check that a view is offered for a format kind.

        Args:
            kind: Format kind, or None for unclassified content
            view: Requested view

        Returns:
            ValidationResult with validation details
        """
        errors = []
        profile = get_profile(kind)

        if not profile.supports(view):
            supported = ", ".join(v.value for v in profile.supported_views)
            errors.append(ValidationError(
                type=ErrorType.UNSUPPORTED,
                message=f"View '{view.value}' is not available for {profile.title} "
                        f"(supported: {supported})",
                location="view"
            ))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=[])

    @staticmethod
    def validate_bytes_per_line(bytes_per_line: int) -> ValidationResult:
        """Validate the hex dump line width."""
        errors = []
        warnings = []

        if bytes_per_line <= 0:
            errors.append(ValidationError(
                type=ErrorType.SIZE,
                message="bytes_per_line must be positive",
                location="bytes_per_line"
            ))
        elif bytes_per_line % 8 != 0:
            warnings.append("bytes_per_line is not a multiple of 8; the mid-line gap will look uneven.")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)
