"""
Error types for theme loading and editor queries.

"Not found" outcomes (no theme in a file, a path that does not exist, an
expression that is not a theme access) are ordinary ``None`` returns and never
raise. The classes here are for configuration problems, unreadable sources and
broken internal invariants.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ThemeLensError(Exception):
    """Base exception for all themelens errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ThemeInvariantError(ThemeLensError):
    """
    Raised when the loading pipeline produces something it never should.

    Examples:
    - A theme document whose root is not an object
    - A located theme node that is not an object literal
    """

    pass


class ManifestError(ThemeLensError):
    """
    Raised when project configuration cannot be used.

    Examples:
    - Malformed themelens.toml
    - Wrong value types in the [theme] table
    - Unparseable theme-imports.json
    """

    pass


class SourceError(ThemeLensError):
    """
    Raised when a source file cannot be read.

    Examples:
    - Configured theme file is missing
    - File is not valid UTF-8
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the file where the error occurred
        line: Optional line number (1-indexed)
        column: Optional column number (1-indexed)
    """

    file: Path
    line: int | None = None
    column: int | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "theme-imports.json:10:5"
        """
        location = str(self.file)
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return location


def make_manifest_error(
    message: str,
    file: Path | None = None,
    line: int | None = None,
    column: int | None = None,
) -> ManifestError:
    """
    Helper to create a ManifestError with optional context.

    Args:
        message: Error description
        file: Optional manifest path
        line: Optional line number
        column: Optional column number

    Returns:
        ManifestError with context when a file is given
    """
    if file is not None:
        return ManifestError(message, ErrorContext(file=file, line=line, column=column))
    return ManifestError(message)
