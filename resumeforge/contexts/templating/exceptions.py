"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import Optional


class TemplateRenderError(Exception):
    """
    Exception raised when template rendering fails.

    Attributes:
        message: Error description
        type_name: Name of the template variant being rendered (e.g., 'classic')
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.type_name = type_name
        self.template_path = template_path
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if type_name and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Variant: {type_name}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class InvalidResumeStructureError(ValueError):
    """
    Exception raised when resume data has an invalid shape.

    Raised only for violated structural preconditions (a record that is not a
    mapping, a list field that is not a list, a missing full name). Absent
    optional fields never raise; they degrade to omission.
    """

    pass


class UnknownTemplateError(ValueError):
    """
    Exception raised for an unknown template identifier or one that belongs
    to the wrong template family (LaTeX vs visual).
    """

    def __init__(self, value, expected: Optional[str] = None, choices: Optional[list] = None):
        self.value = value
        self.expected = expected
        self.choices = list(choices or [])

        message = f"Unknown template '{value}'"
        if expected:
            message += f" for {expected}"
        if self.choices:
            message += f" (expected one of: {', '.join(self.choices)})"

        super().__init__(message)
