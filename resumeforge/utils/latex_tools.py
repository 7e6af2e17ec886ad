"""
LaTeX Tools

Escaping helpers for turning user-supplied plaintext into LaTeX-safe text.

Self-contained module with no project dependencies - designed for reusability.
"""

from typing import Iterable, List, Optional

# One entry per special character. Applied as a single-pass translation, so the
# braces and backslashes introduced by a replacement are never escaped again.
LATEX_ESCAPES = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "%": r"\%",
    "$": r"\$",
    "&": r"\&",
    "#": r"\#",
    "_": r"\_",
    "^": r"\textasciicircum{}",
    "~": r"\textasciitilde{}",
    '"': "''",
}

_TRANSLATION_TABLE = str.maketrans(LATEX_ESCAPES)


def to_latex(plaintext_str: Optional[str]) -> str:
    """
    Convert plaintext to LaTeX by escaping special characters.

    Conversions:
    - \\ → \\textbackslash{}
    - { → \\{ and } → \\}
    - % $ & # _ → backslash-prefixed
    - ^ → \\textasciicircum{}
    - ~ → \\textasciitilde{}
    - " → '' (closing quote ligature)

    Total over its input: None and "" both give "".

    Args:
        plaintext_str: Plain text string

    Returns:
        LaTeX string with special characters escaped

    Example:
        >>> to_latex("AI & Machine Learning")
        'AI \\\\& Machine Learning'
        >>> to_latex("87% on-time delivery")
        '87\\\\% on-time delivery'
    """
    if not plaintext_str:
        return ""
    return str(plaintext_str).translate(_TRANSLATION_TABLE)


def to_latex_list(items: Iterable[Optional[str]]) -> List[str]:
    """Escape every item of a list, keeping order and length."""
    return [to_latex(item) for item in items]
