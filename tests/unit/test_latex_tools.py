"""Unit tests for LaTeX escaping helpers."""

import pytest

from resumeforge.utils.latex_tools import LATEX_ESCAPES, to_latex, to_latex_list


@pytest.mark.unit
@pytest.mark.parametrize(
    "plaintext,expected",
    [
        ("AI & Machine Learning", r"AI \& Machine Learning"),
        ("87% on-time delivery", r"87\% on-time delivery"),
        ("$1M budget", r"\$1M budget"),
        ("C# and F#", r"C\# and F\#"),
        ("snake_case", r"snake\_case"),
        ("{braces}", r"\{braces\}"),
        ("x^2", r"x\textasciicircum{}2"),
        ("~/home", r"\textasciitilde{}/home"),
        ("C:\\Users", r"C:\textbackslash{}Users"),
        ('say "hi"', "say ''hi''"),
        ("plain text", "plain text"),
    ],
)
def test_to_latex_golden_cases(plaintext, expected):
    """Test each special character maps to its LaTeX escape."""
    assert to_latex(plaintext) == expected


@pytest.mark.unit
def test_to_latex_single_pass():
    """Test replacement output is never escaped a second time within one call."""
    # The backslash escape introduces braces that must survive untouched
    assert to_latex("\\") == r"\textbackslash{}"
    assert to_latex("\\{") == r"\textbackslash{}\{"


@pytest.mark.unit
def test_to_latex_is_not_idempotent():
    """Test escaping already-escaped text escapes the backslashes again."""
    once = to_latex("50%")
    assert once == r"50\%"
    assert to_latex(once) == r"50\textbackslash{}\%"


@pytest.mark.unit
@pytest.mark.parametrize("empty", [None, ""])
def test_to_latex_empty_input(empty):
    """Test None and empty string both give empty string."""
    assert to_latex(empty) == ""


@pytest.mark.unit
def test_to_latex_non_ascii_passthrough():
    """Test accented characters are left for inputenc to handle."""
    assert to_latex("José Müller") == "José Müller"


@pytest.mark.unit
def test_to_latex_list_keeps_order_and_length():
    """Test list escaping keeps order and maps empty items to empty strings."""
    assert to_latex_list(["R&D", None, "100%"]) == [r"R\&D", "", r"100\%"]


@pytest.mark.unit
def test_escape_table_covers_all_special_characters():
    """Test every LaTeX special character has an escape entry."""
    assert set("\\{}%$&#_^~") <= set(LATEX_ESCAPES)
