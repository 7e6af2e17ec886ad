"""Unit tests for local LaTeX compilation helpers."""

import pytest

from resumeforge.contexts.rendering import compiler
from resumeforge.contexts.rendering.compiler import (
    _parse_latex_log,
    _remove_artifacts,
    compile_latex,
    latex_available,
)

SAMPLE_LOG = r"""This is pdfTeX, Version 3.141592653
! Undefined control sequence.
l.12 \foo
! Missing $ inserted.
LaTeX Warning: Reference `sec:intro' on page 1 undefined on input line 5.
Package hyperref Warning: Token not allowed in a PDF string
Overfull \hbox (12.0pt too wide) in paragraph at lines 20--21
Underfull \hbox (badness 10000) in paragraph at lines 30--31
"""


class TestParseLatexLog:
    """Test log parsing for errors and warnings."""

    @pytest.mark.unit
    def test_errors(self):
        errors, _ = _parse_latex_log(SAMPLE_LOG)
        assert errors == ["Undefined control sequence.", "Missing $ inserted."]

    @pytest.mark.unit
    def test_warnings(self):
        _, warnings = _parse_latex_log(SAMPLE_LOG)
        assert len(warnings) == 4
        assert warnings[0].startswith("Reference `sec:intro'")
        assert warnings[1] == "Token not allowed in a PDF string"
        assert "12.0pt too wide" in warnings[2]

    @pytest.mark.unit
    def test_emergency_stop_without_marker(self):
        errors, _ = _parse_latex_log("*** (job aborted, no legal \\end found)\nEmergency stop.\n")
        assert errors == ["Emergency stop."]

    @pytest.mark.unit
    def test_clean_log(self):
        assert _parse_latex_log("Output written on resume.pdf (1 page).") == ([], [])


@pytest.mark.unit
def test_compile_latex_missing_file(tmp_path):
    """Test a missing .tex file fails without invoking the compiler."""
    result = compile_latex(tmp_path / "missing.tex")
    assert not result.success
    assert "not found" in result.errors[0]


@pytest.mark.unit
def test_compile_latex_missing_compiler(tmp_path, monkeypatch):
    """Test a missing compiler executable is reported as a failed result."""
    tex = tmp_path / "resume.tex"
    tex.write_text(r"\documentclass{article}\begin{document}x\end{document}")
    monkeypatch.setattr(compiler, "LATEX_COMPILER", "definitely-not-a-latex-compiler")

    result = compile_latex(tex)

    assert not result.success
    assert result.errors == ["LaTeX compiler not found: definitely-not-a-latex-compiler"]
    assert not latex_available("definitely-not-a-latex-compiler")


@pytest.mark.unit
def test_remove_artifacts(tmp_path):
    tex = tmp_path / "resume.tex"
    for ext in (".tex", ".aux", ".log", ".out", ".pdf"):
        (tmp_path / f"resume{ext}").write_text("")

    _remove_artifacts(tex)

    assert sorted(p.name for p in tmp_path.iterdir()) == ["resume.pdf", "resume.tex"]
