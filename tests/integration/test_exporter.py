"""Integration tests for export artifacts."""

import pytest

from resumeforge.contexts.rendering.exporter import (
    HTML_MIME,
    LATEX_MIME,
    PDF_MIME,
    ExportArtifact,
    clipboard_text,
    export_filename,
    export_latex,
    export_pdf,
    export_preview,
    write_artifact,
)
from resumeforge.contexts.templating.exceptions import UnknownTemplateError
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate


@pytest.mark.unit
@pytest.mark.parametrize(
    "name,template,extension,expected",
    [
        ("Jane Doe", LatexTemplate.CLASSIC, "tex", "Jane_Doe_Resume_Classic.tex"),
        ("  Jane  Q\tDoe ", LatexTemplate.MODERN, ".tex", "Jane_Q_Doe_Resume_Modern.tex"),
        ("Jane Doe", VisualTemplate.EXECUTIVE, "pdf", "Jane_Doe_Resume_Executive.pdf"),
        ("A/B Lee", LatexTemplate.MINIMAL, "tex", "A_B_Lee_Resume_Minimal.tex"),
        ("..\\Jane: Doe", VisualTemplate.TECH, "pdf", ".._Jane_Doe_Resume_Tech.pdf"),
    ],
)
def test_export_filename(name, template, extension, expected):
    assert export_filename(name, template, extension) == expected


@pytest.mark.integration
def test_export_latex(sample_resume):
    artifact = export_latex(sample_resume, "minimal")

    assert artifact.filename == "Jane_Doe_Resume_Minimal.tex"
    assert artifact.mime == LATEX_MIME
    assert artifact.content.startswith(r"\documentclass")
    assert artifact.size == len(artifact.content)


@pytest.mark.integration
def test_clipboard_matches_export(sample_resume):
    """Test copied text equals the downloaded source."""
    assert clipboard_text(sample_resume, "classic") == export_latex(sample_resume, "classic").content


@pytest.mark.integration
def test_export_pdf(sample_resume):
    artifact = export_pdf(sample_resume, VisualTemplate.CREATIVE)

    assert artifact.filename == "Jane_Doe_Resume_Creative.pdf"
    assert artifact.mime == PDF_MIME
    assert artifact.content[:4] == b"%PDF"


@pytest.mark.integration
def test_export_preview(sample_resume):
    artifact = export_preview(sample_resume, "tech")
    assert artifact.filename == "Jane_Doe_Resume_Tech.html"
    assert artifact.mime == HTML_MIME


@pytest.mark.integration
def test_wrong_family_rejected(sample_resume):
    with pytest.raises(UnknownTemplateError):
        export_latex(sample_resume, "executive")
    with pytest.raises(UnknownTemplateError):
        export_pdf(sample_resume, "classic")


class TestWriteArtifact:
    """Test atomic artifact writes."""

    @pytest.mark.unit
    def test_text(self, tmp_path):
        artifact = ExportArtifact("Jane_Resume_Modern.tex", LATEX_MIME, "café \\\\")
        path = write_artifact(artifact, tmp_path / "out")

        assert path == tmp_path / "out" / "Jane_Resume_Modern.tex"
        assert path.read_text(encoding="utf-8") == "café \\\\"

    @pytest.mark.unit
    def test_bytes(self, tmp_path):
        path = write_artifact(ExportArtifact("a.pdf", PDF_MIME, b"%PDF-1.4"), tmp_path)
        assert path.read_bytes() == b"%PDF-1.4"

    @pytest.mark.unit
    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        write_artifact(ExportArtifact("a.tex", LATEX_MIME, "one"), tmp_path)
        path = write_artifact(ExportArtifact("a.tex", LATEX_MIME, "two"), tmp_path)

        assert path.read_text(encoding="utf-8") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["a.tex"]

    @pytest.mark.unit
    def test_name_with_separator_stays_in_directory(self, tmp_path, make_resume):
        doc = make_resume(personalInfo={"fullName": "A/B Lee"})
        path = write_artifact(export_latex(doc, "modern"), tmp_path)

        assert path.parent == tmp_path
        assert path.name == "A_B_Lee_Resume_Modern.tex"
