"""
Text processing utilities for formatting and display.
"""

import re


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Original text if within max_len, otherwise truncated with "..."

    Example:
        >>> truncate_display("short", 10)
        "short"
        >>> truncate_display("this is a very long string", 10)
        "this is..."
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Replaces runs of blank lines longer than max_consecutive with exactly
    max_consecutive blank lines.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines, 1 for standard
                        normalization (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        pattern = r"\n[ \t]*\n([ \t]*\n)*"
    else:
        pattern = r"\n[ \t]*\n([ \t]*\n)+"

    replacement = "\n" * (max_consecutive + 1)

    return re.sub(pattern, replacement, content)


def strip_trailing_whitespace(content: str) -> str:
    """Remove trailing spaces and tabs from every line."""
    return "\n".join(line.rstrip() for line in content.split("\n"))


def prepend_without_overlap(prefix: str, value: str) -> str:
    """
    Prepend prefix to value unless value already starts with it.

    Example:
        >>> prepend_without_overlap("https://", "example.com")
        'https://example.com'
        >>> prepend_without_overlap("https://", "https://example.com")
        'https://example.com'
    """
    if value.startswith(prefix):
        return value
    return f"{prefix}{value}"


def collapse_whitespace(text: str, replacement: str = " ") -> str:
    """Replace every run of whitespace with a single replacement string."""
    return re.sub(r"\s+", replacement, text.strip())
